class RiskPanelException(Exception):
    """Base Exception Class"""
    pass
class RecordSchemaError(RiskPanelException):
    """Error for a panel record that is missing its identifying fields"""
    pass
class ConfigError(RiskPanelException):
    """Config Error"""
    pass
class InvalidThresholdError(RiskPanelException, ValueError):
    """Error for a spike threshold outside (0, inf)"""
    pass
