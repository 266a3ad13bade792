"""
Tests for the GraphQL API over HTTP and websockets
"""
import pytest

from retro_meeting.auth import create_auth_token
from retro_meeting.db import AgendaItem, Organization, OrganizationUser, OrgUserRole, ReflectTemplate, RetroPhaseItem
from retro_meeting.db.models import team_member_id
from retro_meeting.services.palette import PALETTE_OPTIONS

GRAPHQL_URL = "/graphql"


def execute(client, query, variables=None, headers=None):
    response = client.post(GRAPHQL_URL, json={"query": query, "variables": variables or {}}, headers=headers or {})
    assert response.status_code == 200
    return response.json()


def execute_over_websocket(client, token, query, variables=None):
    """Run one operation over graphql-transport-ws and return the result payload"""
    with client.websocket_connect(f"{GRAPHQL_URL}?token={token}", subprotocols=["graphql-transport-ws"]) as ws:
        ws.send_json({"type": "connection_init"})
        assert ws.receive_json()["type"] == "connection_ack"
        ws.send_json({"id": "1", "type": "subscribe", "payload": {"query": query, "variables": variables or {}}})
        message = ws.receive_json()
        assert message["type"] == "next"
        assert message["id"] == "1"
        return message["payload"]


@pytest.fixture
def leader_headers(org_setup, auth_headers):
    return auth_headers(org_setup["leader"].id, [org_setup["team"].id])


@pytest.fixture
def member_headers(org_setup, auth_headers):
    return auth_headers(org_setup["member"].id, [org_setup["team"].id])


class TestQueries:
    """Test viewer and team queries"""

    def test_viewer_requires_login(self, client):
        body = execute(client, "{ viewer { id } }")

        assert body["data"] is None
        error = body["errors"][0]
        assert error["message"] == "Unauthorized. Please log in"
        assert error["extensions"]["code"] == "AUTH_ERROR"

    def test_viewer_with_teams_and_agenda(self, client, db_session, org_setup, member_headers):
        team = org_setup["team"]
        member = org_setup["member"]
        db_session.add(AgendaItem(team_id=team.id, team_member_id=team_member_id(member.id, team.id),
                                  content="Flaky deploys", sort_order=1))
        db_session.commit()

        body = execute(client, """
            {
              viewer {
                preferredName
                inactive
                teams { name agendaItems { content teamMember { preferredName } } }
              }
            }
        """, headers=member_headers)

        assert "errors" not in body
        viewer = body["data"]["viewer"]
        assert viewer["preferredName"] == "Max Member"
        assert viewer["inactive"] is False
        assert viewer["teams"] == [{
            "name": "Engineering",
            "agendaItems": [{"content": "Flaky deploys", "teamMember": {"preferredName": "Max Member"}}],
        }]

    def test_agenda_item_removed_mid_meeting(self, client, org_setup, member_headers):
        body = execute(client, """
            query Team($teamId: ID!) { team(teamId: $teamId) { agendaItem(agendaItemId: "gone") { id } } }
        """, {"teamId": org_setup["team"].id}, member_headers)

        assert body["data"]["team"]["agendaItem"] is None

    def test_organization(self, client, org_setup, member_headers):
        body = execute(client, """
            query Org($orgId: ID!) { organization(orgId: $orgId) { name activeUserCount inactiveUserCount } }
        """, {"orgId": org_setup["org"].id}, member_headers)

        assert body["data"]["organization"] == {"name": "Parabol", "activeUserCount": 2, "inactiveUserCount": 0}

    def test_reflect_templates_with_palette(self, client, db_session, org_setup, member_headers):
        team = org_setup["team"]
        template = ReflectTemplate(team_id=team.id, name="Glad Sad Mad")
        db_session.add(template)
        db_session.flush()
        db_session.add(RetroPhaseItem(team_id=team.id, template_id=template.id, question="Glad",
                                      group_color=PALETTE_OPTIONS[0].hex, sort_order=0))
        db_session.add(RetroPhaseItem(team_id=team.id, template_id=template.id, question="Sad",
                                      group_color=PALETTE_OPTIONS[1].hex, sort_order=1))
        db_session.commit()

        body = execute(client, """
            query Templates($teamId: ID!) {
              reflectTemplates(teamId: $teamId) {
                name
                prompts { question groupColor sortOrder palette { hex isAvailable isCurrentColor } }
              }
            }
        """, {"teamId": team.id}, member_headers)

        assert "errors" not in body
        templates = body["data"]["reflectTemplates"]
        assert [t["name"] for t in templates] == ["Glad Sad Mad"]
        glad = templates[0]["prompts"][0]
        assert glad["question"] == "Glad"
        assert glad["sortOrder"] == 0.0
        palette = {color["hex"]: color for color in glad["palette"]}
        assert len(palette) == 12
        assert palette[PALETTE_OPTIONS[0].hex] == {
            "hex": PALETTE_OPTIONS[0].hex, "isAvailable": False, "isCurrentColor": True
        }
        assert palette[PALETTE_OPTIONS[1].hex]["isAvailable"] is False
        assert palette[PALETTE_OPTIONS[2].hex]["isAvailable"] is True


class TestMutations:
    """Test mutations and their error shapes"""

    def test_update_org_over_http_requires_websocket(self, client, org_setup, leader_headers):
        body = execute(client, """
            mutation Update($org: UpdateOrgInput!) { updateOrg(updatedOrg: $org) }
        """, {"org": {"id": org_setup["org"].id, "name": "Renamed"}}, leader_headers)

        error = body["errors"][0]
        assert error["message"] == "Websocket required"
        assert error["extensions"]["code"] == "FORBIDDEN"

    def test_update_org_rejects_bad_picture_url(self, client, org_setup, leader_headers):
        response = client.post(GRAPHQL_URL, headers=leader_headers, json={
            "query": "mutation Update($org: UpdateOrgInput!) { updateOrg(updatedOrg: $org) }",
            "variables": {"org": {"id": org_setup["org"].id, "picture": "not a url"}},
        })
        body = response.json()

        assert body.get("data") is None
        assert body["errors"]

    def test_inactivate_user(self, client, db_session, org_setup, leader_headers, mock_gateway):
        body = execute(client, """
            mutation Pause($userId: ID!) { inactivateUser(userId: $userId) }
        """, {"userId": org_setup["member"].id}, leader_headers)

        assert body["data"] == {"inactivateUser": True}
        db_session.expire_all()
        assert db_session.get(Organization, org_setup["org"].id).inactive_user_count == 1

    def test_inactivate_user_needs_leader(self, client, org_setup, member_headers):
        body = execute(client, """
            mutation Pause($userId: ID!) { inactivateUser(userId: $userId) }
        """, {"userId": org_setup["leader"].id}, member_headers)

        assert body["errors"][0]["extensions"]["code"] == "FORBIDDEN"

    def test_remove_org_user(self, client, org_setup, leader_headers):
        body = execute(client, """
            mutation Remove($userId: ID!, $orgId: ID!) { removeOrgUser(userId: $userId, orgId: $orgId) }
        """, {"userId": org_setup["member"].id, "orgId": org_setup["org"].id}, leader_headers)

        assert body["data"] == {"removeOrgUser": True}

    def test_create_org_picture_put_url(self, client, org_setup, leader_headers):
        body = execute(client, """
            mutation PutUrl($orgId: ID!) {
              createOrgPicturePutUrl(contentLength: 1000, orgId: $orgId, contentType: "image/png")
            }
        """, {"orgId": org_setup["org"].id}, leader_headers)

        url = body["data"]["createOrgPicturePutUrl"]
        assert url.startswith("http://testserver/storage/Organization/")

    def test_picture_validation_error(self, client, org_setup, leader_headers):
        body = execute(client, """
            mutation PutUrl($orgId: ID!) {
              createOrgPicturePutUrl(contentLength: 1000, orgId: $orgId, contentType: "text/html")
            }
        """, {"orgId": org_setup["org"].id}, leader_headers)

        error = body["errors"][0]
        assert error["message"] == "file must be an image"
        assert error["extensions"]["code"] == "VALIDATION_ERROR"

    def test_add_org(self, client, make_user, auth_headers):
        founder = make_user("Founder")

        body = execute(client, """
            mutation AddOrg($team: NewTeamInput!, $name: String!) {
              addOrg(newTeam: $team, orgName: $name) { name activeUserCount }
            }
        """, {"team": {"name": "Core"}, "name": "Acme"}, auth_headers(founder.id))

        assert body["data"]["addOrg"] == {"name": "Acme", "activeUserCount": 1}

    def test_add_org_validation_details(self, client, make_user, auth_headers):
        founder = make_user("Founder")

        body = execute(client, """
            mutation AddOrg($team: NewTeamInput!, $name: String!) {
              addOrg(newTeam: $team, orgName: $name) { id }
            }
        """, {"team": {"name": "Core"}, "name": "A"}, auth_headers(founder.id))

        extensions = body["errors"][0]["extensions"]
        assert extensions["code"] == "VALIDATION_ERROR"
        assert "org_name" in extensions["details"]["errors"]

    def test_update_prompt_group_color(self, client, db_session, org_setup, member_headers):
        team = org_setup["team"]
        template = ReflectTemplate(team_id=team.id, name="Glad Sad Mad")
        db_session.add(template)
        db_session.flush()
        prompt = RetroPhaseItem(team_id=team.id, template_id=template.id, question="Glad",
                                group_color=PALETTE_OPTIONS[0].hex, sort_order=0)
        db_session.add(prompt)
        db_session.commit()

        body = execute(client, """
            mutation Color($promptId: ID!, $color: String!) {
              updateReflectTemplatePromptGroupColor(promptId: $promptId, groupColor: $color) { id groupColor }
            }
        """, {"promptId": prompt.id, "color": PALETTE_OPTIONS[5].hex}, member_headers)

        assert body["data"]["updateReflectTemplatePromptGroupColor"] == {
            "id": prompt.id, "groupColor": PALETTE_OPTIONS[5].hex
        }


class TestWebsocketMutations:
    """Mutations that only run over a websocket, logged in with ?token="""

    @pytest.fixture
    def leader_ws_token(self, org_setup):
        return create_auth_token(org_setup["leader"].id, [org_setup["team"].id])

    def test_update_org(self, client, db_session, org_setup, leader_ws_token):
        org_id = org_setup["org"].id

        payload = execute_over_websocket(client, leader_ws_token, """
            mutation Update($org: UpdateOrgInput!) { updateOrg(updatedOrg: $org) }
        """, {"org": {"id": org_id, "name": "Renamed"}})

        assert payload == {"data": {"updateOrg": True}}
        db_session.expire_all()
        assert db_session.get(Organization, org_id).name == "Renamed"

    def test_remove_billing_leader(self, client, db_session, org_setup, make_user, leader_ws_token):
        org_id = org_setup["org"].id
        co_leader = make_user("Co Leader")
        db_session.add(OrganizationUser(org_id=org_id, user_id=co_leader.id, role=OrgUserRole.BILLING_LEADER.value))
        db_session.commit()
        co_leader_id = co_leader.id

        payload = execute_over_websocket(client, leader_ws_token, """
            mutation Demote($orgId: ID!, $userId: ID!) { removeBillingLeader(orgId: $orgId, userId: $userId) }
        """, {"orgId": org_id, "userId": co_leader_id})

        assert payload == {"data": {"removeBillingLeader": True}}
        db_session.expire_all()
        membership = db_session.query(OrganizationUser).filter_by(org_id=org_id, user_id=co_leader_id).one()
        assert membership.role == OrgUserRole.MEMBER.value

    def test_update_org_needs_login(self, client, org_setup):
        payload = execute_over_websocket(client, "not-a-token", """
            mutation Update($org: UpdateOrgInput!) { updateOrg(updatedOrg: $org) }
        """, {"org": {"id": org_setup["org"].id, "name": "Renamed"}})

        assert payload["data"] is None
        assert payload["errors"][0]["extensions"]["code"] == "AUTH_ERROR"


def test_request_id_header(client):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"
