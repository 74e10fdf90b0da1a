import pytest


class TestPricingConfigEndpoints:

    @pytest.mark.asyncio
    async def test_defaults_when_tenant_has_no_record(self, test_client):
        response = await test_client.get("/tenants/1/pricing-config")

        assert response.status_code == 200
        body = response.json()
        assert body["tenant_id"] == "1"
        assert body["source"] == "default"
        assert body["config"]["ageBonuses"]["age0to5"] == 10000
        assert body["config"]["distanceAdjustments"]["dropoffComplete"] == 500
        assert body["config"]["partsBonuses"]["engineTransmissionCatalyst"] == 1000

    @pytest.mark.asyncio
    async def test_update_stores_only_supplied_categories(self, test_client, config_repo):
        response = await test_client.put(
            "/tenants/1/pricing-config",
            json={"oldCarDeduction": {"before1990": -2500}},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["source"] == "tenant"
        assert body["config"]["oldCarDeduction"]["before1990"] == -2500
        assert body["config"]["ageBonuses"]["age0to5"] == 10000
        assert config_repo.records["1"] == {"oldCarDeduction": {"before1990": -2500.0}}

    @pytest.mark.asyncio
    async def test_update_changes_quotes(self, test_client):
        await test_client.put(
            "/tenants/1/pricing-config",
            json={"fuelAdjustments": {"gasoline": 0, "ethanol": 0, "electric": 0, "other": -300}},
        )
        response = await test_client.post("/quotes/calc", json={
            "tenant_id": "1",
            "vehicle": {"year": 1995, "fuel_type": "other"},
        })

        assert response.json()["fuel_adjustment"] == -300.0
        assert response.json()["breakdown"][-1]["description"] == "Annat"

    @pytest.mark.asyncio
    async def test_update_keeps_previously_saved_categories(self, test_client, config_repo, custom_age_bonuses):
        await test_client.put("/tenants/1/pricing-config", json={"ageBonuses": custom_age_bonuses})
        await test_client.put("/tenants/1/pricing-config", json={"oldCarDeduction": {"before1990": -2000}})

        response = await test_client.get("/tenants/1/pricing-config")

        body = response.json()
        assert body["source"] == "tenant"
        assert body["config"]["ageBonuses"]["age0to5"] == 20000
        assert body["config"]["oldCarDeduction"]["before1990"] == -2000
        assert set(config_repo.records["1"]) == {"ageBonuses", "oldCarDeduction"}

    @pytest.mark.asyncio
    async def test_update_rejects_nonzero_named_fuel(self, test_client, config_repo):
        response = await test_client.put(
            "/tenants/1/pricing-config",
            json={"fuelAdjustments": {"gasoline": -100, "ethanol": 0, "electric": 0, "other": -500}},
        )

        assert response.status_code == 422
        assert config_repo.records == {}

    @pytest.mark.asyncio
    async def test_empty_stored_record_reported_as_default(self, test_client, config_repo):
        config_repo.records["1"] = {}

        response = await test_client.get("/tenants/1/pricing-config")

        assert response.json()["source"] == "default"

    @pytest.mark.asyncio
    async def test_update_rejects_out_of_range_values(self, test_client, config_repo):
        response = await test_client.put(
            "/tenants/1/pricing-config",
            json={"distanceAdjustments": {
                "dropoffComplete": 500,
                "dropoffIncomplete": 0,
                "pickup0to20": 250,
                "pickup20to50": -500,
                "pickup50to75": -1000,
                "pickup75to100": -1250,
                "pickup100plus": -2500,
            }},
        )

        assert response.status_code == 422
        assert config_repo.records == {}

    @pytest.mark.asyncio
    async def test_update_rejects_incomplete_category(self, test_client):
        response = await test_client.put(
            "/tenants/1/pricing-config",
            json={"ageBonuses": {"age0to5": 12000}},
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_update_requires_a_category(self, test_client):
        response = await test_client.put("/tenants/1/pricing-config", json={})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_reset_to_defaults(self, test_client, config_repo, custom_age_bonuses):
        config_repo.records["1"] = {"ageBonuses": custom_age_bonuses}

        response = await test_client.delete("/tenants/1/pricing-config")
        assert response.status_code == 200
        assert response.json() == {"reset": True}

        response = await test_client.get("/tenants/1/pricing-config")
        assert response.json()["source"] == "default"

    @pytest.mark.asyncio
    async def test_reset_without_record(self, test_client):
        response = await test_client.delete("/tenants/1/pricing-config")
        assert response.status_code == 404


class TestBasePriceEndpoint:

    @pytest.mark.asyncio
    async def test_known_model(self, test_client):
        response = await test_client.get(
            "/tenants/1/base-price", params={"brand": "Volvo", "model": "V70", "year": 2004}
        )

        assert response.status_code == 200
        assert response.json()["base_price"] == 3000.0

    @pytest.mark.asyncio
    async def test_unknown_model(self, test_client):
        response = await test_client.get(
            "/tenants/1/base-price", params={"brand": "Saab", "model": "9000", "year": 1994}
        )
        assert response.status_code == 404
