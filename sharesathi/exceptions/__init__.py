"""
Custom exceptions
=================
One base class; the app turns any of these into a JSON error response
"""


class ShareSathiException(Exception):
    """ShareSathi base exception"""
    status_code: int = 400
    error_code: str = "SHARESATHI_ERROR"

    def __init__(self, message: str, error_code: str = None):
        self.message = message
        if error_code:
            self.error_code = error_code
        super().__init__(message)


class StockNotFoundError(ShareSathiException):
    """Stock not found"""
    status_code = 404
    error_code = "STOCK_NOT_FOUND"

    def __init__(self, symbol: str):
        super().__init__(f"Stock not found: {symbol}")
        self.symbol = symbol


class DataSourceError(ShareSathiException):
    """External data source failed"""
    status_code = 502
    error_code = "DATA_SOURCE_ERROR"

    def __init__(self, source: str, message: str = None):
        msg = f"{source} data source error"
        if message:
            msg += f": {message}"
        super().__init__(msg)
        self.source = source


class QuotaExceededError(DataSourceError):
    """Provider quota or rate limit hit"""
    status_code = 429
    error_code = "QUOTA_EXCEEDED"


class ValidationError(ShareSathiException):
    """Request validation failed"""
    status_code = 422
    error_code = "VALIDATION_ERROR"


class WatchlistNotFoundError(ShareSathiException):
    """Watchlist not found"""
    status_code = 404
    error_code = "WATCHLIST_NOT_FOUND"

    def __init__(self, watchlist_id: str):
        super().__init__(f"Watchlist not found: {watchlist_id}")
        self.watchlist_id = watchlist_id


class ReadOnlyWatchlistError(ShareSathiException):
    """Default watchlist cannot be edited"""
    status_code = 403
    error_code = "WATCHLIST_READ_ONLY"

    def __init__(self, watchlist_id: str):
        super().__init__(f"Watchlist {watchlist_id} is read-only")
        self.watchlist_id = watchlist_id


class WatchlistLimitError(ShareSathiException):
    """Watchlist capacity reached"""
    status_code = 409
    error_code = "WATCHLIST_LIMIT"

    def __init__(self, message: str = "Watchlist limit reached"):
        super().__init__(message)


class ArticleNotFoundError(ShareSathiException):
    """Learn article not found"""
    status_code = 404
    error_code = "ARTICLE_NOT_FOUND"

    def __init__(self, slug: str):
        super().__init__(f"Article not found: {slug}")
        self.slug = slug
