"""
Profile 发现测试（选择器按顺序尝试）
"""

from app.services.profile_directory import discover_profiles

BASE = "https://api.raisely.test/v3"
CAMPAIGN = "camp-1"

BY_CAMPAIGN = f"{BASE}/profiles?campaign={CAMPAIGN}&limit=200"
BY_CAMPAIGN_PROFILE = f"{BASE}/profiles?campaignProfile={CAMPAIGN}&limit=200"
BY_SITE = f"{BASE}/profiles?site=bike-week&limit=200"
BY_ACTIVE = f"{BASE}/profiles?campaign={CAMPAIGN}&status=active&limit=200"
CAMPAIGN_META = f"{BASE}/campaigns/{CAMPAIGN}"


def test_first_selector_wins(raisely, fake_session):
    fake_session.add(BY_CAMPAIGN, 200, {"data": [{"uuid": "p-1"}]})

    listing = discover_profiles(raisely)

    assert listing.path == "profiles?campaign"
    assert listing.status == 200
    assert listing.profiles == [{"uuid": "p-1"}]
    assert listing.tried == [BY_CAMPAIGN]


def test_empty_list_falls_through_to_site_slug(raisely, fake_session):
    fake_session.add(BY_CAMPAIGN, 200, {"data": []})
    fake_session.add(BY_CAMPAIGN_PROFILE, 400, {"message": "bad filter"})
    fake_session.add(CAMPAIGN_META, 200, {"data": {"site": {"slug": "bike-week"}}})
    fake_session.add(BY_SITE, 200, {"data": [{"uuid": "p-9"}]})
    attempts = []

    listing = discover_profiles(raisely, attempts)

    assert listing.path == "profiles?site=bike-week"
    assert listing.site_slug == "bike-week"
    assert listing.tried == [BY_CAMPAIGN, BY_CAMPAIGN_PROFILE, BY_SITE]
    assert [a.url for a in attempts] == [BY_CAMPAIGN, BY_CAMPAIGN_PROFILE, CAMPAIGN_META, BY_SITE]


def test_active_status_selector(raisely, fake_session):
    fake_session.add(BY_ACTIVE, 200, {"data": [{"uuid": "p-2"}]})

    listing = discover_profiles(raisely)

    assert listing.path == "profiles?campaign&status=active"
    assert listing.tried == [BY_CAMPAIGN, BY_CAMPAIGN_PROFILE, BY_ACTIVE]


def test_all_selectors_fail_returns_empty_listing(raisely, fake_session):
    fake_session.add(CAMPAIGN_META, 200, {"data": {"site": {"slug": "bike-week"}}})
    fake_session.add(BY_ACTIVE, 401, {"message": "unauthorised"})

    listing = discover_profiles(raisely)

    assert listing.profiles == []
    assert listing.path == "profiles (empty)"
    assert listing.status == 401
    assert listing.tried == [BY_CAMPAIGN, BY_CAMPAIGN_PROFILE, BY_SITE, BY_ACTIVE]
