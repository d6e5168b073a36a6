"""
Transaction operations
"""
from datetime import datetime
from typing import Optional, Union

from .exceptions import TransactionOperationsError
from .models import Sort, Transaction, Transactions
from .operations import BaseOperations
from .rest import build_params

# Epoch seconds or a datetime
DateArg = Union[int, datetime]


def _epoch(value: DateArg) -> int:
    if isinstance(value, datetime):
        return int(value.timestamp())
    return int(value)


class TransactionOperations(BaseOperations):
    error_class = TransactionOperationsError

    def _params(self, from_date, to_date, start, limit, sort, include_pending):
        return build_params(
            fromDate=_epoch(from_date),
            toDate=_epoch(to_date),
            start=start,
            limit=limit,
            sort=sort,
            includePending=include_pending,
        )

    def get_transactions(self, customer_id: str, from_date: DateArg, to_date: DateArg,
                         start: Optional[int] = None, limit: Optional[int] = None,
                         sort: Optional[Sort] = None,
                         include_pending: Optional[bool] = None) -> Transactions:
        """All transactions of the customer posted between the two dates"""
        params = self._params(from_date, to_date, start, limit, sort, include_pending)
        return self._get(f"/v2/customers/{customer_id}/transactions", Transactions, params)

    def get_account_transactions(self, customer_id: str, account_id: str,
                                 from_date: DateArg, to_date: DateArg,
                                 start: Optional[int] = None, limit: Optional[int] = None,
                                 sort: Optional[Sort] = None,
                                 include_pending: Optional[bool] = None) -> Transactions:
        params = self._params(from_date, to_date, start, limit, sort, include_pending)
        path = f"/v2/customers/{customer_id}/accounts/{account_id}/transactions"
        return self._get(path, Transactions, params)

    def get_transaction(self, customer_id: str, transaction_id: str) -> Transaction:
        return self._get(f"/v2/customers/{customer_id}/transactions/{transaction_id}", Transaction)
