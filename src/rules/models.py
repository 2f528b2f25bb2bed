from pydantic import BaseModel, Field


class ProjectRules(BaseModel):
    slug: str
    rules_version: str
    required_sections: list[str]

class RequirementDefaults(BaseModel):
    require_landing_page: bool = True
    require_ticketing_config: bool = True
    require_seo: bool = False
    require_accessibility: bool = False

class PublishingRules(BaseModel):
    default_requirements: RequirementDefaults
    default_approval_roles: list[str] = Field(min_length=1)
    approver_roles: list[str]
    priorities: list[str] = Field(min_length=1)
    settings_path_template: str | None = None

class RegexRule(BaseModel):
    min: int
    max: int
    pattern: str

class PromoCodeRules(BaseModel):
    code: RegexRule
    generated_length: int = Field(ge=4)
    alphabet: str = Field(min_length=2)
    currency_symbol: str
    max_percentage: int = 100

class TicketingRules(BaseModel):
    max_tickets_per_order: int = Field(ge=1)
    default_currency: str

class WorkspaceRules(BaseModel):
    max_depth: int = Field(ge=1)
    level_permissions: dict[str, list[str]]

class Rules(BaseModel):
    project: ProjectRules
    publishing: PublishingRules
    promo_codes: PromoCodeRules
    ticketing: TicketingRules
    workspaces: WorkspaceRules
