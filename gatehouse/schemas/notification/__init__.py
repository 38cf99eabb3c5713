from gatehouse.schemas.notification.push import PushTokenRegister, ReminderRunResponse, SuccessResponse

__all__ = ["PushTokenRegister", "SuccessResponse", "ReminderRunResponse"]
