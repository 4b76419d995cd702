class KitchenManualError(Exception):
    pass


class ConfigError(KitchenManualError):
    pass


class MissingFileError(KitchenManualError):
    pass


class ValidationError(KitchenManualError):
    pass


class InvalidArgument(ValidationError, ValueError):
    pass
