class BrokerError(Exception):
    """Base class for all broker and rebalancing errors"""
    pass

class ConfigurationError(BrokerError):
    """Raised when a required configuration value is missing or empty"""
    pass

class BrokerConnectionError(BrokerError):
    """Raised when broker connection fails"""
    pass

class SessionInitError(BrokerConnectionError):
    """Raised when a broker session cannot be established with the given credential"""
    pass

class BrokerAPIError(BrokerError):
    """Raised when broker API returns an error"""
    pass

class FetchError(BrokerAPIError):
    """Raised when holdings, positions or market data cannot be fetched"""
    pass

class OrderExecutionError(BrokerAPIError):
    """Raised when order execution fails"""
    pass

class InvalidTradeType(BrokerError, ValueError):
    """Raised when an order is built for anything other than BUY or SELL"""
    pass
