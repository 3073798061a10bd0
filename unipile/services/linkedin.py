from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
from urllib.parse import quote

from ..enums import SearchParameterType
from ..utils import compact
from .base import BaseService

LINKEDIN_PATH = "/api/v1/linkedin"
SALES_NAVIGATOR_PATH = f"{LINKEDIN_PATH}/sales-navigator"

RANGE_KEYS = ('min', 'max')

# Python filter name -> (wire name, nested keys copied for structured filters)
COMPANY_FILTERS: Dict[str, Tuple[str, Optional[Tuple[str, ...]]]] = {
    'keywords': ('keywords', None),
    'industries': ('industries', None),
    'locations': ('locations', None),
    'employee_count_range': ('employee_count', RANGE_KEYS),
    'revenue_range': ('revenue', RANGE_KEYS),
    'growth_rate': ('growth_rate', None),
    'technologies': ('technologies', None),
    'department_headcount': ('department_headcount', ('department',) + RANGE_KEYS),
    'fortune_ranking': ('fortune_ranking', None),
    'is_hiring': ('is_hiring', None),
    'recently_funded': ('recently_funded', None),
    'has_job_openings': ('has_job_openings', None),
}

PEOPLE_FILTERS: Dict[str, Tuple[str, Optional[Tuple[str, ...]]]] = {
    'keywords': ('keywords', None),
    'titles': ('titles', None),
    'seniority_levels': ('seniority_levels', None),
    'functions': ('functions', None),
    'companies': ('companies', None),
    'company_urns': ('company_urns', None),
    'industries': ('industries', None),
    'locations': ('locations', None),
    'schools': ('schools', None),
    'years_of_experience': ('years_of_experience', RANGE_KEYS),
    'years_in_current_position': ('years_in_current_position', RANGE_KEYS),
    'years_at_current_company': ('years_at_current_company', RANGE_KEYS),
    'connection_degree': ('connection_degree', None),
    'changed_jobs_recently': ('changed_jobs_recently', None),
    'posted_recently': ('posted_recently', None),
    'profile_language': ('profile_language', None),
}


def build_filters(
    filters: Optional[Mapping[str, Any]], spec: Dict[str, Tuple[str, Optional[Tuple[str, ...]]]]
) -> Dict[str, Any]:
    """
    Translate search filters to the API's wire format.

    Filters set to None are left out. Structured filters (ranges, department
    headcount) are copied key by key, dropping unset keys.

    Raises:
        ValueError: For filter names the search does not support
    """
    api_filters: Dict[str, Any] = {}
    for name, value in (filters or {}).items():
        if name not in spec:
            raise ValueError(f"Unsupported search filter: {name}")
        if value is None:
            continue
        wire_name, nested_keys = spec[name]
        if nested_keys is not None:
            value = compact(**{key: value.get(key) for key in nested_keys})
        api_filters[wire_name] = value
    return api_filters


class LinkedInService(BaseService):
    """LinkedIn Sales Navigator search, profile enrichment and outreach"""

    async def search_companies(
        self,
        account_id: str,
        filters: Optional[Mapping[str, Any]] = None,
        limit: Optional[int] = None,
        cursor: Optional[str] = None,
    ) -> Dict[str, Any]:
        response = await self._http.post(
            f"{SALES_NAVIGATOR_PATH}/companies/search",
            compact(
                account_id=account_id,
                filters=build_filters(filters, COMPANY_FILTERS),
                limit=limit,
                cursor=cursor,
            ),
            account_id,
        )
        return response.data

    async def search_people(
        self,
        account_id: str,
        filters: Optional[Mapping[str, Any]] = None,
        limit: Optional[int] = None,
        cursor: Optional[str] = None,
    ) -> Dict[str, Any]:
        response = await self._http.post(
            f"{SALES_NAVIGATOR_PATH}/people/search",
            compact(
                account_id=account_id,
                filters=build_filters(filters, PEOPLE_FILTERS),
                limit=limit,
                cursor=cursor,
            ),
            account_id,
        )
        return response.data

    async def enrich_company(self, account_id: str, company_identifier: str) -> Dict[str, Any]:
        response = await self._http.get(
            f"{LINKEDIN_PATH}/companies/enrich",
            {'account_id': account_id, 'identifier': company_identifier},
            account_id,
        )
        return response.data

    async def enrich_person(self, account_id: str, person_identifier: str) -> Dict[str, Any]:
        response = await self._http.get(
            f"{LINKEDIN_PATH}/people/enrich",
            {'account_id': account_id, 'identifier': person_identifier},
            account_id,
        )
        return response.data

    async def get_search_parameters(
        self, account_id: str, type: Union[SearchParameterType, str], query: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Values available for a Sales Navigator search parameter (industries, locations, ...)"""
        response = await self._http.get(
            f"{SALES_NAVIGATOR_PATH}/search-parameters",
            {'account_id': account_id, 'type': type, 'query': query},
            account_id,
        )
        return self._list(response.data, 'values')

    async def get_industries(self, account_id: str, query: Optional[str] = None) -> List[Dict[str, Any]]:
        return await self.get_search_parameters(account_id, SearchParameterType.INDUSTRY, query)

    async def get_locations(self, account_id: str, query: Optional[str] = None) -> List[Dict[str, Any]]:
        return await self.get_search_parameters(account_id, SearchParameterType.LOCATION, query)

    async def get_company_sizes(self, account_id: str) -> List[Dict[str, Any]]:
        return await self.get_search_parameters(account_id, SearchParameterType.COMPANY_SIZE)

    async def get_seniority_levels(self, account_id: str) -> List[Dict[str, Any]]:
        return await self.get_search_parameters(account_id, SearchParameterType.SENIORITY)

    async def get_functions(self, account_id: str) -> List[Dict[str, Any]]:
        return await self.get_search_parameters(account_id, SearchParameterType.FUNCTION)

    async def get_company(self, account_id: str, company_urn: str) -> Dict[str, Any]:
        response = await self._http.get(
            f"{LINKEDIN_PATH}/companies/{quote(company_urn, safe='')}", {'account_id': account_id}, account_id
        )
        return response.data

    async def get_person(self, account_id: str, person_urn: str) -> Dict[str, Any]:
        response = await self._http.get(
            f"{LINKEDIN_PATH}/people/{quote(person_urn, safe='')}", {'account_id': account_id}, account_id
        )
        return response.data

    async def get_company_employees(
        self, account_id: str, company_urn: str, limit: Optional[int] = None, cursor: Optional[str] = None
    ) -> Dict[str, Any]:
        response = await self._http.get(
            f"{LINKEDIN_PATH}/companies/{quote(company_urn, safe='')}/employees",
            {'account_id': account_id, 'limit': limit, 'cursor': cursor},
            account_id,
        )
        return response.data

    async def send_connection_request(self, account_id: str, person_urn: str, message: Optional[str] = None) -> None:
        await self._http.post(
            f"{LINKEDIN_PATH}/connections",
            compact(account_id=account_id, person_urn=person_urn, message=message),
            account_id,
        )

    async def endorse_skill(self, account_id: str, person_urn: str, skill_name: str) -> None:
        await self._http.post(
            f"{LINKEDIN_PATH}/people/{quote(person_urn, safe='')}/skills/endorse",
            {'account_id': account_id, 'skill': skill_name},
            account_id,
        )
