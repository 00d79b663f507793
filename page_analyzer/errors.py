class PageAnalyzerError(Exception):
    pass


class InvalidUrl(PageAnalyzerError):
    pass


class NotFound(PageAnalyzerError):
    pass


class StorageError(PageAnalyzerError):
    pass


class UrlAlreadyExists(StorageError):
    pass


class FetchFailure(PageAnalyzerError):
    pass
