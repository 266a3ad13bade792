"""
GraphQL mutations
"""
from typing import Optional

import strawberry
from strawberry.types import Info

from ..services.organization_service import OrganizationService
from ..services.template_service import TemplateService
from .types import URL, NewTeamInput, Organization, RetroPhaseItem, UpdateOrgInput


def _org_service(info: Info) -> OrganizationService:
    context = info.context
    return OrganizationService(context.db, context.gateway, context.storage)


@strawberry.type
class Mutation:

    @strawberry.mutation(description="Update an org with a change in name, avatar")
    def update_org(self, info: Info, updated_org: UpdateOrgInput) -> bool:
        return _org_service(info).update_org(
            info.context.auth_token, updated_org.to_dict(), info.context.via_websocket
        )

    @strawberry.mutation(description="Remove a billing leader from an org")
    def remove_billing_leader(self, info: Info, org_id: strawberry.ID, user_id: strawberry.ID) -> bool:
        return _org_service(info).remove_billing_leader(
            info.context.auth_token, org_id, user_id, info.context.via_websocket
        )

    @strawberry.mutation(description="Add a credit card to an org's billing account")
    def add_billing(self, info: Info, org_id: strawberry.ID, stripe_token: str) -> bool:
        return _org_service(info).add_billing(info.context.auth_token, org_id, stripe_token)

    @strawberry.mutation(description="pauses the subscription for a single user")
    def inactivate_user(self, info: Info, user_id: strawberry.ID) -> bool:
        return _org_service(info).inactivate_user(info.context.auth_token, user_id)

    @strawberry.mutation(description="Remove a user from an org")
    def remove_org_user(self, info: Info, user_id: strawberry.ID, org_id: strawberry.ID) -> bool:
        return _org_service(info).remove_org_user(info.context.auth_token, org_id, user_id)

    @strawberry.mutation(description="Create a PUT URL on the CDN for an organization's profile picture")
    def create_org_picture_put_url(self, info: Info, content_length: int, org_id: strawberry.ID,
                                   content_type: Optional[str] = None) -> Optional[URL]:
        return _org_service(info).create_org_picture_put_url(
            info.context.auth_token, org_id, content_type, content_length
        )

    @strawberry.mutation(description="Create a new organization along with its first team")
    def add_org(self, info: Info, new_team: NewTeamInput, org_name: str) -> Organization:
        org = _org_service(info).add_org(info.context.auth_token, org_name, new_team.name)
        return Organization.from_model(org)

    @strawberry.mutation(description="Change the group color of a reflection prompt")
    def update_reflect_template_prompt_group_color(self, info: Info, prompt_id: strawberry.ID,
                                                   group_color: str) -> RetroPhaseItem:
        prompt = TemplateService(info.context.db).update_prompt_group_color(
            info.context.auth_token, prompt_id, group_color
        )
        return RetroPhaseItem.from_model(prompt)
