"""
사용자 응답 메시지 및 리다이렉트 경로
"""

# 사용자에게 노출되는 오류 메시지
ERROR_MESSAGES = {
    "invalid_email": "이메일 형식이 올바르지 않습니다.",
    "incomplete_data": "요청을 처리하기 위한 정보가 부족합니다.",
    "server_error": "서버 내부 오류가 발생했습니다.",
    "email_not_subscribed": "구독 중인 이메일이 아닙니다.",
    "email_config_error": "이메일 발송 설정에 오류가 있습니다.",
    "tags_update_error": "구독자 태그를 업데이트하지 못했습니다.",
    "subscription_error": "구독을 완료하지 못했습니다.",
}

# 사용자에게 노출되는 성공 메시지
SUCCESS_MESSAGES = {
    "subscription_new": "구독이 완료되었습니다.",
    "subscription_updated": "이미 구독 중인 이메일입니다. 구독 정보를 업데이트했습니다.",
    "unsubscription": "구독이 해지되었습니다.",
    "resource_sent": "자료를 이메일로 보내드렸습니다.",
    "email_sent": "이메일이 발송되었습니다.",
}

# 구독 해지 GET 요청 리다이렉트 대상
SUCCESS_PAGES = {
    "unsubscribe": "/unsubscribe-success",
}

ERROR_PAGES = {
    "not_found": "/404",
}
