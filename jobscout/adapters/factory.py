"""Factory function for instantiating ATS adapters."""

from typing import Dict, Optional, Type

from jobscout.config.models import AdvancedConfig
from jobscout.domain.models import Company, ProviderType
from jobscout.logging import get_logger
from jobscout.matching import SkillExtractor

from .ashby import AshbyAdapter
from .base import BaseAdapter
from .custom import CustomAdapter
from .greenhouse import GreenhouseAdapter
from .lever import LeverAdapter
from .smartrecruiters import SmartRecruitersAdapter
from .workday import WorkdayAdapter

logger = get_logger(__name__, component="adapter")

ADAPTERS: Dict[ProviderType, Type[BaseAdapter]] = {
    ProviderType.GREENHOUSE: GreenhouseAdapter,
    ProviderType.LEVER: LeverAdapter,
    ProviderType.WORKDAY: WorkdayAdapter,
    ProviderType.ASHBY: AshbyAdapter,
    ProviderType.SMARTRECRUITERS: SmartRecruitersAdapter,
    ProviderType.CUSTOM: CustomAdapter,
}


def get_adapter(
    company: Company,
    advanced_config: Optional[AdvancedConfig] = None,
    skill_extractor: Optional[SkillExtractor] = None,
) -> Optional[BaseAdapter]:
    """Build the adapter for ``company``'s provider.

    Returns None (with a warning) when the provider identifier the adapter
    needs is missing, so one misconfigured company never stops a pass.

    Example:
        >>> company = Company(name="Linear", provider="ashby", ashby_id="linear")
        >>> adapter = get_adapter(company, AdvancedConfig())
        >>> jobs = adapter.scrape()
    """
    advanced_config = advanced_config or AdvancedConfig()
    provider = ProviderType(company.provider)
    adapter_class = ADAPTERS[provider]

    if provider != ProviderType.CUSTOM and not company.provider_identifier():
        logger.warning(
            f"Skipping {company.name}: no {provider.value} identifier configured",
            extra={
                "event": "adapter.identifier_missing",
                "company": company.name,
                "provider": provider.value,
            },
        )
        return None

    logger.debug(
        "Creating adapter instance",
        extra={"company": company.name, "adapter_class": adapter_class.__name__},
    )
    return adapter_class(
        company,
        timeout=advanced_config.http_request_timeout,
        user_agent=advanced_config.user_agent,
        max_jobs=advanced_config.max_jobs_per_company,
        skill_extractor=skill_extractor,
    )
