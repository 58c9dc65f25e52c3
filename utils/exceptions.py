"""성적 도메인 예외. 각 예외는 HTTP 상태 코드와 에러 코드를 함께 가진다."""


class GradebookError(Exception):
    """Base exception for the grade service"""
    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class InvalidIdentifier(GradebookError):
    """식별자가 24자리 16진수 문자열이 아님 (저장소 조회 전에 거부)"""
    status_code = 400
    code = "INVALID_ID"

    def __init__(self, value):
        self.value = value
        super().__init__("Invalid ID format")


class NotFound(GradebookError):
    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, resource: str, id=None):
        message = f"{resource} not found"
        if id is not None:
            message += f" with id: {id}"
        super().__init__(message)


class StoreFailure(GradebookError):
    """저장소 장애. 내부 진단 정보는 로그로만 남기고 응답에는 노출하지 않는다."""
    status_code = 500
    code = "STORE_FAILURE"

    def __init__(self, detail: str = ""):
        self.detail = detail
        super().__init__("Internal Server Error")


class ComputationUndefined(GradebookError):
    """빈 집합에 대한 집계 (예: 0명 코호트, 비어 있는 점수 유형)"""
    status_code = 422
    code = "COMPUTATION_UNDEFINED"
