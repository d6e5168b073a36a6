"""
Institution metadata operations
"""
from typing import Optional

from .exceptions import InstitutionOperationsError
from .models import Institution, InstitutionDetails, Institutions, LoginForm
from .operations import BaseOperations
from .rest import build_params


class InstitutionOperations(BaseOperations):
    error_class = InstitutionOperationsError

    def get_institutions(self, search: Optional[str] = None, start: Optional[int] = None,
                         limit: Optional[int] = None) -> Institutions:
        params = build_params(search=search, start=start, limit=limit)
        return self._get("/v1/institutions", Institutions, params)

    def get_institution(self, institution_id: str) -> Institution:
        return self._get(f"/v1/institutions/{institution_id}", Institution)

    def get_institution_details(self, institution_id: str) -> InstitutionDetails:
        """Institution record together with its login form"""
        return self._get(f"/v1/institutions/{institution_id}/details", InstitutionDetails)

    def get_institution_login_form(self, institution_id: str) -> LoginForm:
        return self._get(f"/v1/institutions/{institution_id}/loginForm", LoginForm)
