# paygate/schemas/__init__.py

from .gateway import GatewayFailure, GatewaySuccess, TransferReceipt
