from .account import Account
from .gateway_token import GatewayToken
from .transaction import Transaction, TransactionStatus
