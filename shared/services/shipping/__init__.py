from .jnt import JntShippingService

__all__ = ['JntShippingService']
