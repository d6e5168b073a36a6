"""
Customer operations
"""
from typing import Optional

from .exceptions import CustomerOperationsError
from .models import Customer, Customers, CustomerType
from .operations import BaseOperations
from .rest import build_params


class CustomerOperations(BaseOperations):
    error_class = CustomerOperationsError

    def get_customers(self, search: Optional[str] = None, username: Optional[str] = None,
                      start: Optional[int] = None, limit: Optional[int] = None,
                      type: Optional[CustomerType] = None) -> Customers:
        params = build_params(search=search, username=username, start=start, limit=limit, type=type)
        return self._get("/v1/customers", Customers, params)

    def get_customer(self, customer_id: str) -> Customer:
        return self._get(f"/v1/customers/{customer_id}", Customer)

    def add_testing_customer(self, customer: Customer) -> Customer:
        """Create a customer that may only use test institutions"""
        return self._create("/v1/customers/testing", customer, Customer)

    def add_customer(self, customer: Customer) -> Customer:
        """Create a billable customer"""
        return self._create("/v1/customers/active", customer, Customer)

    def modify_customer(self, customer: Customer) -> None:
        self._update(f"/v1/customers/{customer.id}", customer)

    def delete_customer(self, customer_id: str) -> None:
        self._delete(f"/v1/customers/{customer_id}")
