from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class PageRequestMetadata(BaseModel):
    """Text fields of a page creation request.

    Every field is optional at this level; the validator enforces the two
    required ones. Fields the client never sent stay unset and are left out
    of the upstream JSON.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    api_type: Optional[Any] = Field(default=None, alias="apiType")
    fetch_property_file: Optional[Any] = Field(default=None, alias="fetchPropertyFile")
    selected_git_org: Optional[Any] = Field(default=None, alias="selectedGitOrg")
    wiki_space_key: Optional[Any] = Field(default=None, alias="wikiSpaceKey")
    page_title: Optional[Any] = Field(default=None, alias="pageToBeCreatedTitle")
    parent_page_title: Optional[Any] = Field(default=None, alias="pageToBeCreatedParentPageTitle")
    app_name: Optional[Any] = Field(default=None, alias="appName")
    l0_production_support: Optional[Any] = Field(default=None, alias="l0ProductionSupport")
    l0_production_support_email: Optional[Any] = Field(default=None, alias="l0ProductionSupportEmail")
    l2_mulesoft_support: Optional[Any] = Field(default=None, alias="l2MulesoftSupport")
    l2_mulesoft_support_email: Optional[Any] = Field(default=None, alias="l2MulesoftSupportEmail")
    integration_dev_team: Optional[Any] = Field(default=None, alias="integrationDevTeam")
    integration_dev_team_email: Optional[Any] = Field(default=None, alias="integrationDevTeamEmail")
    business_team: Optional[Any] = Field(default=None, alias="businessTeam")
    business_team_email: Optional[Any] = Field(default=None, alias="businessTeamEmail")
    has_files: Optional[Any] = Field(default=None, alias="hasFiles")

    def to_upstream(self, has_attachments: bool) -> dict[str, Any]:
        data = self.model_dump(by_alias=True, exclude_unset=True, exclude={"has_files"})
        data["hasFiles"] = has_attachments
        return data

    def contact_info(self) -> dict[str, Any]:
        return self.model_dump(
            by_alias=True,
            include={
                "l0_production_support",
                "l0_production_support_email",
                "l2_mulesoft_support",
                "l2_mulesoft_support_email",
                "integration_dev_team",
                "integration_dev_team_email",
                "business_team",
                "business_team_email",
            },
        )


class PageCreatedResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = "success"
    page_url: str = Field(..., alias="pageUrl")


class ErrorResponse(BaseModel):
    status: str = "error"
    message: str
    error: Optional[str] = None
    details: Optional[Any] = None
