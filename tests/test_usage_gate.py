"""Free quota rules and the explicit user session."""
import pytest

from nuvra.models import UsageLog, User
from nuvra.services.session_service import UserSession
from nuvra.services.user_service import build_upgrade_url, check_usage_limit, remaining_uses


def _user(status: str = "free", uses: int = 0) -> User:
    return User(id="u1", name="Ana", phone="11999990000", subscription_status=status, total_uses=uses)


def test_free_user_at_limit_is_blocked():
    assert check_usage_limit(_user("free", 10)) is False
    assert remaining_uses(_user("free", 10)) == 0


def test_free_user_below_limit_passes():
    assert check_usage_limit(_user("free", 9)) is True
    assert remaining_uses(_user("free", 9)) == 1


def test_trial_follows_free_quota():
    assert check_usage_limit(_user("trial", 10)) is False
    assert check_usage_limit(_user("trial", 0)) is True


@pytest.mark.parametrize("status", ["active", "client"])
@pytest.mark.parametrize("uses", [0, 10, 500])
def test_paid_plans_are_unlimited(status, uses):
    user = _user(status, uses)
    assert check_usage_limit(user) is True
    assert remaining_uses(user) is None


def test_remaining_never_negative():
    assert remaining_uses(_user("free", 25)) == 0


def test_no_user_cannot_use():
    assert check_usage_limit(None) is False
    assert remaining_uses(None) == 0


def test_session_lifecycle_without_database():
    session = UserSession(_user("free", 3))
    assert session.is_authenticated
    assert session.check_usage_limit()
    assert session.remaining_uses == 7

    session.logout()
    assert not session.is_authenticated
    assert session.user_id is None
    assert not session.check_usage_limit()


def test_upgrade_url_points_to_whatsapp():
    url = build_upgrade_url()
    assert url.startswith("https://wa.me/5511999999999?text=")
    assert " " not in url


def test_unknown_subscription_status_is_rejected():
    with pytest.raises(ValueError):
        _user("gold")


def test_usage_log_types():
    assert UsageLog(user_id="u1", input_text="oi", analysis_type="chat").analysis_type == "chat"
    with pytest.raises(ValueError):
        UsageLog(user_id="u1", input_text="oi", analysis_type="image")
