"""
TxPush notification operations
"""
from .exceptions import TxPushOperationsError
from .models import Subscription, Subscriptions, Transaction
from .operations import BaseOperations


class TxPushOperations(BaseOperations):
    error_class = TxPushOperationsError

    def enable_tx_push_notifications(self, customer_id: str, account_id: str,
                                     subscription: Subscription) -> Subscriptions:
        """Register ``subscription.callback_url`` for account and transaction events"""
        path = f"/v1/customers/{customer_id}/accounts/{account_id}/txpush"
        return self._create(path, subscription, Subscriptions)

    def disable_tx_push_notifications(self, customer_id: str, account_id: str) -> None:
        self._delete(f"/v1/customers/{customer_id}/accounts/{account_id}/txpush")

    def delete_tx_push_subscription(self, customer_id: str, subscription_id: str) -> None:
        self._delete(f"/v1/customers/{customer_id}/subscriptions/{subscription_id}")

    def add_transaction_for_testing_account(self, customer_id: str, account_id: str,
                                            transaction: Transaction) -> Transaction:
        # Only accounts of testing customers accept injected transactions
        path = f"/v1/customers/{customer_id}/accounts/{account_id}/transactions"
        return self._create(path, transaction, Transaction)
