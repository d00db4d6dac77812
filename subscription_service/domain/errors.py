"""
Subscription error taxonomy

Use cases raise these; the HTTP layer maps them to status codes.
"""


class SubscriptionError(Exception):
    """Base class for all subscription-level failures"""

    default_message = "Ошибка обработки подписки"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(SubscriptionError, ValueError):
    """Malformed input (date, id) - caller error"""
    default_message = "Неправильный запрос или невалидные данные"


class NotFound(SubscriptionError):
    """Target row does not exist, or a list query matched zero rows"""
    default_message = "Подписка не найдена"


class DuplicateEntry(SubscriptionError):
    """(user_id, service_name, start_date) already taken"""
    default_message = "Неправильный запрос или дубликат подписки"


class StorageFailure(SubscriptionError):
    """Connectivity, timeout or any other store-level fault"""
    default_message = "Внутренняя ошибка сервера"


class OperationCancelled(StorageFailure):
    """Deadline expired or the statement was cancelled mid-flight"""
    default_message = "Превышено время ожидания базы данных"
