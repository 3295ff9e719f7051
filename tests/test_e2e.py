"""End-to-end test against the real Google login.

Needs SHARED_LOCATIONS_USER and SHARED_LOCATIONS_PASSWORD and runs only with
the --e2e option.
"""

import os

import pytest

from shared_locations import AuthPipeline, LocationFetcher, LocationSession


@pytest.mark.e2e
def test_live_login_and_roster():
    user = os.environ.get("SHARED_LOCATIONS_USER")
    password = os.environ.get("SHARED_LOCATIONS_PASSWORD")
    if not user or not password:
        pytest.skip("SHARED_LOCATIONS_USER and SHARED_LOCATIONS_PASSWORD not set")

    with LocationSession() as session:
        pipeline = AuthPipeline.for_credentials(session, user, password)
        outcome = pipeline.run()
        assert outcome.ok, f"{outcome.failed_stage}: {outcome.error}"

        records = LocationFetcher(session, pipeline.state).fetch()

    for record in records:
        assert record.id
        assert -90 <= record.latitude <= 90
        assert -180 <= record.longitude <= 180
