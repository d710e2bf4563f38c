"""서비스 에러 코드

서비스 레이어는 ValueError(에러 코드)를 발생시키고,
호출자(UI/핸들러)는 이 표로 사용자 메시지를 얻는다.
"""

# (error_category, message)
SERVICE_ERROR_MESSAGES: dict[str, tuple[str, str]] = {
    # 댓글 작성
    "EMPTY_COMMENT": ("BAD_REQUEST", "Comment cannot be empty"),
    "REPLY_DEPTH_EXCEEDED": ("BAD_REQUEST", "Replies cannot be nested any deeper"),
    "DISCUSSION_CLOSED": ("CONFLICT", "Discussion is no longer open"),
    # 댓글 조회/삭제
    "COMMENT_NOT_FOUND": ("NOT_FOUND", "Comment not found"),
    "PERMISSION_DENIED": ("FORBIDDEN", "Permission denied"),
}


def describe_service_error(
    error: ValueError, default_message: str = "Validation error"
) -> dict[str, str]:
    """서비스 에러를 표시용 dict로 변환

    Args:
        error: 서비스에서 발생한 ValueError (에러 코드가 str로 전달됨)
        default_message: 매핑되지 않은 에러의 기본 메시지
    """
    error_code = str(error)

    if error_code in SERVICE_ERROR_MESSAGES:
        category, message = SERVICE_ERROR_MESSAGES[error_code]
        return {"error": category, "code": error_code, "message": message}

    return {"error": "VALIDATION_ERROR", "code": "VALIDATION_ERROR", "message": default_message}
