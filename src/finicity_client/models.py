"""
Data models for Finicity API resources

Field names are snake_case; the XML element names are the camelCase form of
the field name unless the field metadata says otherwise.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import ClassVar, Dict, List, Optional, Union


def xml(name: Optional[str] = None, *, attribute: bool = False, item: Optional[str] = None,
        wrapper: Optional[str] = None, inline: bool = False, skip: bool = False) -> dict:
    """Field metadata describing how a field maps onto XML"""
    return {'xml': {'name': name, 'attribute': attribute, 'item': item,
                    'wrapper': wrapper, 'inline': inline, 'skip': skip}}


# --- Client-side values ---------------------------------------------------

@dataclass(frozen=True)
class Token:
    """Short-lived partner access token"""
    value: str = field(repr=False)
    expires_at: datetime  # issued_at + client-side lifetime

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


@dataclass(frozen=True)
class Credentials:
    """Long-lived partner credentials"""
    app_key: str = field(repr=False)
    partner_id: str
    partner_secret: str = field(repr=False)


# --- Enums ------------------------------------------------------------------

class AccountType(Enum):
    CHECKING = 'checking'
    SAVINGS = 'savings'
    CD = 'cd'
    MONEY_MARKET = 'moneyMarket'
    CREDIT_CARD = 'creditCard'
    LINE_OF_CREDIT = 'lineOfCredit'
    INVESTMENT = 'investment'
    INVESTMENT_TAX_DEFERRED = 'investmentTaxDeferred'
    EMPLOYEE_STOCK_PURCHASE_PLAN = 'employeeStockPurchasePlan'
    IRA = 'ira'
    K401 = '401k'
    ROTH = 'roth'
    K403B = '403b'
    PLAN_529 = '529'
    ROLLOVER = 'rollover'
    UGMA = 'ugma'
    UTMA = 'utma'
    KEOGH = 'keogh'
    PLAN_457 = '457'
    K401A = '401a'
    MORTGAGE = 'mortgage'
    LOAN = 'loan'
    UNKNOWN = 'unknown'

    @classmethod
    def _missing_(cls, value):
        # New account types appear on the API before they appear here
        return cls.UNKNOWN


class AccountStatus(Enum):
    ACTIVE = 'active'
    PENDING = 'pending'


class CustomerType(Enum):
    TESTING = 'testing'
    ACTIVE = 'active'


class TransactionStatus(Enum):
    ACTIVE = 'active'
    PENDING = 'pending'
    SHADOW = 'shadow'


class SubscriptionType(Enum):
    ACCOUNT = 'account'
    TRANSACTION = 'transaction'


class Sort(Enum):
    ASC = 'asc'
    DESC = 'desc'


# --- List wrappers ----------------------------------------------------------

class _ResourceList:
    """Sequence behaviour for the paged list wrappers"""
    ITEMS: ClassVar[str]

    def _items(self) -> list:
        return getattr(self, self.ITEMS)

    def __iter__(self):
        return iter(self._items())

    def __len__(self) -> int:
        return len(self._items())

    def __getitem__(self, index):
        return self._items()[index]


# --- Partner ----------------------------------------------------------------

@dataclass
class PartnerCredentials:
    """Body of the partner authentication request"""
    XML_TAG: ClassVar[str] = 'credentials'
    partner_id: str
    partner_secret: str
    new_partner_secret: Optional[str] = None


@dataclass
class PartnerAccess:
    """Body of a successful partner authentication"""
    XML_TAG: ClassVar[str] = 'access'
    token: str = field(repr=False)


# --- Institutions -----------------------------------------------------------

@dataclass
class LoginField:
    """One credential input of an institution login form"""
    XML_TAG: ClassVar[str] = 'loginField'
    id: str
    name: str
    value: Optional[str] = field(default=None, repr=False)
    display_order: Optional[int] = None
    mask: Optional[bool] = None
    description: Optional[str] = None
    instructions: Optional[str] = None
    value_length_min: Optional[int] = None
    value_length_max: Optional[int] = None


@dataclass
class LoginForm:
    XML_TAG: ClassVar[str] = 'loginForm'
    login_fields: List[LoginField] = field(default_factory=list, metadata=xml(item='loginField'))


@dataclass
class Institution:
    XML_TAG: ClassVar[str] = 'institution'
    id: Optional[str] = None
    name: Optional[str] = None
    account_type_description: Optional[str] = None
    url_home_app: Optional[str] = None
    url_logon_app: Optional[str] = None
    phone: Optional[str] = None
    currency: Optional[str] = None
    email: Optional[str] = None
    special_text: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None


@dataclass
class InstitutionDetails:
    XML_TAG: ClassVar[str] = 'institutionDetails'
    institution: Optional[Institution] = None
    login_form: Optional[LoginForm] = None


@dataclass
class Institutions(_ResourceList):
    XML_TAG: ClassVar[str] = 'institutions'
    ITEMS: ClassVar[str] = 'institutions'
    found: Optional[int] = field(default=None, metadata=xml(attribute=True))
    displaying: Optional[int] = field(default=None, metadata=xml(attribute=True))
    more_available: Optional[bool] = field(default=None, metadata=xml(attribute=True))
    institutions: List[Institution] = field(default_factory=list, metadata=xml(item='institution'))


# --- Customers --------------------------------------------------------------

@dataclass
class Customer:
    XML_TAG: ClassVar[str] = 'customer'
    id: Optional[str] = None
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    type: Optional[CustomerType] = None
    created_date: Optional[int] = None  # epoch seconds


@dataclass
class Customers(_ResourceList):
    XML_TAG: ClassVar[str] = 'customers'
    ITEMS: ClassVar[str] = 'customers'
    found: Optional[int] = field(default=None, metadata=xml(attribute=True))
    displaying: Optional[int] = field(default=None, metadata=xml(attribute=True))
    more_available: Optional[bool] = field(default=None, metadata=xml(attribute=True))
    customers: List[Customer] = field(default_factory=list, metadata=xml(item='customer'))


# --- Accounts ---------------------------------------------------------------

@dataclass
class Account:
    XML_TAG: ClassVar[str] = 'account'
    id: str
    number: str
    name: str
    type: AccountType
    status: AccountStatus
    balance: Optional[float] = None
    aggregation_status_code: Optional[int] = None
    customer_id: Optional[str] = None
    institution_id: Optional[str] = None
    balance_date: Optional[int] = None  # epoch seconds, like the other *_date fields
    aggregation_success_date: Optional[int] = None
    aggregation_attempt_date: Optional[int] = None
    created_date: Optional[int] = None
    last_updated_date: Optional[int] = None
    detail: Optional[str] = None


@dataclass
class AccountList(_ResourceList):
    """Accounts returned by a completed (HTTP 200) account call"""
    XML_TAG: ClassVar[str] = 'accounts'
    ITEMS: ClassVar[str] = 'accounts'
    found: Optional[int] = field(default=None, metadata=xml(attribute=True))
    displaying: Optional[int] = field(default=None, metadata=xml(attribute=True))
    more_available: Optional[bool] = field(default=None, metadata=xml(attribute=True))
    accounts: List[Account] = field(default_factory=list, metadata=xml(item='account'))


@dataclass
class AccountLoginForm:
    """Institution credentials submitted to add or discover accounts"""
    XML_TAG: ClassVar[str] = 'accounts'
    credentials: List[LoginField] = field(
        default_factory=list, metadata=xml(wrapper='credentials', item='loginField'))

    @classmethod
    def from_login_form(cls, login_form: LoginForm) -> 'AccountLoginForm':
        return cls(credentials=list(login_form.login_fields))


# --- MFA challenges ---------------------------------------------------------

@dataclass
class MfaQuestion:
    """One interactive question of an MFA challenge"""
    XML_TAG: ClassVar[str] = 'question'
    text: Optional[str] = None
    image: Optional[str] = None  # base64 data URI
    choices: Dict[str, str] = field(
        default_factory=dict, metadata=xml(item='choice', inline=True))  # value -> label
    image_choices: Dict[str, str] = field(
        default_factory=dict, metadata=xml(item='imageChoice', inline=True))  # value -> image
    answer: Optional[str] = None  # set by the caller before resubmitting
    session: Optional[str] = field(default=None, metadata=xml(skip=True))


@dataclass
class MfaChallenge:
    XML_TAG: ClassVar[str] = 'mfaChallenges'
    found: Optional[int] = field(default=None, metadata=xml(attribute=True))
    displaying: Optional[int] = field(default=None, metadata=xml(attribute=True))
    more_available: Optional[bool] = field(default=None, metadata=xml(attribute=True))
    questions: List[MfaQuestion] = field(
        default_factory=list, metadata=xml(wrapper='questions', item='question'))
    session: Optional[str] = field(default=None, metadata=xml(skip=True))


@dataclass
class ChallengeSet:
    """MFA challenges returned by an account call (HTTP 203)

    ``session`` comes from the MFA-Session response header and must be sent
    back with the answers.
    """
    XML_TAG: ClassVar[str] = 'accounts'
    challenges: List[MfaChallenge] = field(default_factory=list, metadata=xml(item='mfaChallenges'))
    session: Optional[str] = field(default=None, metadata=xml(skip=True))

    @property
    def questions(self) -> List[MfaQuestion]:
        return [question for challenge in self.challenges for question in challenge.questions]

    def attach_session(self, session: str) -> None:
        self.session = session
        for challenge in self.challenges:
            challenge.session = session
            for question in challenge.questions:
                question.session = session


# Result of an account call that may be challenged
OperationResult = Union[AccountList, ChallengeSet]


# --- Transactions -----------------------------------------------------------

@dataclass
class Categorization:
    XML_TAG: ClassVar[str] = 'categorization'
    normalized_payee_name: Optional[str] = None
    category: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    best_representation: Optional[str] = None


@dataclass
class Transaction:
    XML_TAG: ClassVar[str] = 'transaction'
    id: Optional[str] = None
    amount: Optional[float] = None
    account_id: Optional[str] = None
    customer_id: Optional[str] = None
    status: Optional[TransactionStatus] = None
    description: Optional[str] = None
    memo: Optional[str] = None
    type: Optional[str] = None
    posted_date: Optional[int] = None  # epoch seconds
    transaction_date: Optional[int] = None
    created_date: Optional[int] = None
    institution_transaction_id: Optional[str] = None
    check_num: Optional[str] = None
    bonus_amount: Optional[float] = None
    escrow_amount: Optional[float] = None
    fee_amount: Optional[float] = None
    interest_amount: Optional[float] = None
    principal_amount: Optional[float] = None
    unit_quantity: Optional[float] = None
    unit_value: Optional[float] = None
    categorization: Optional[Categorization] = None


@dataclass
class Transactions(_ResourceList):
    XML_TAG: ClassVar[str] = 'transactions'
    ITEMS: ClassVar[str] = 'transactions'
    found: Optional[int] = field(default=None, metadata=xml(attribute=True))
    displaying: Optional[int] = field(default=None, metadata=xml(attribute=True))
    more_available: Optional[bool] = field(default=None, metadata=xml(attribute=True))
    from_date: Optional[int] = field(default=None, metadata=xml(attribute=True))
    to_date: Optional[int] = field(default=None, metadata=xml(attribute=True))
    sort: Optional[Sort] = field(default=None, metadata=xml(attribute=True))
    transactions: List[Transaction] = field(default_factory=list, metadata=xml(item='transaction'))


# --- TxPush -----------------------------------------------------------------

@dataclass
class Subscription:
    XML_TAG: ClassVar[str] = 'subscription'
    id: Optional[str] = None
    account_id: Optional[str] = None
    type: Optional[SubscriptionType] = None
    callback_url: Optional[str] = None
    signing_key: Optional[str] = field(default=None, repr=False)


@dataclass
class Subscriptions(_ResourceList):
    XML_TAG: ClassVar[str] = 'subscriptions'
    ITEMS: ClassVar[str] = 'subscriptions'
    subscriptions: List[Subscription] = field(default_factory=list, metadata=xml(item='subscription'))
