"""Truck data routes — catalogue from the DB, with constant fallback."""

from truckest.models import TruckSection, VehiclePart


async def test_sections_fall_back_when_tables_empty(client):
    res = await client.get("/api/truck-data/sections")
    assert res.status_code == 200
    sections = res.json()["sections"]
    assert len(sections) == 7
    assert sections[0]["id"] == sections[0]["name"]


async def test_sections_from_database_use_real_ids(client, catalogue):
    res = await client.get("/api/truck-data/sections")
    sections = res.json()["sections"]
    assert len(sections) == 7
    by_name = {s["name"]: s for s in sections}
    assert by_name["Top/Roof"]["id"] == catalogue["sections"]["Top/Roof"]
    part_names = [p["name"] for p in by_name["Top/Roof"]["vehicle_parts"]]
    assert "Sun Visor" in part_names
    assert part_names == sorted(part_names)


async def test_sections_hide_rows_outside_the_catalogue(client, catalogue, test_session_factory):
    async with test_session_factory() as db:
        trailer = TruckSection(name="Trailer", vehicle_parts=[VehiclePart(name="Kingpin")])
        db.add(trailer)
        await db.commit()
    names = [s["name"] for s in (await client.get("/api/truck-data/sections")).json()["sections"]]
    assert "Trailer" not in names


async def test_damage_types(client, catalogue):
    res = await client.get("/api/truck-data/damage-types")
    types = res.json()["damage_types"]
    assert len(types) == 26
    assert {"id": catalogue["damage_types"]["Dent"], "name": "Dent"} in types


async def test_severity_levels_ordered_by_rank(client, catalogue):
    res = await client.get("/api/truck-data/severity-levels")
    levels = res.json()["severity_levels"]
    assert [lvl["name"] for lvl in levels] == ["Minor", "Moderate", "Severe", "Critical"]


async def test_severity_fallback(client):
    res = await client.get("/api/truck-data/severity-levels")
    assert res.json()["severity_levels"][0] == {"id": "Minor", "name": "Minor", "rank": 0}


async def test_catalogue_falls_back_when_database_unreachable(client, unreachable_db):
    sections = await client.get("/api/truck-data/sections")
    assert sections.status_code == 200
    assert len(sections.json()["sections"]) == 7
    assert sections.json()["sections"][0]["id"] == sections.json()["sections"][0]["name"]

    damage = await client.get("/api/truck-data/damage-types")
    assert damage.status_code == 200
    assert len(damage.json()["damage_types"]) == 26

    severity = await client.get("/api/truck-data/severity-levels")
    assert severity.json()["severity_levels"][0]["id"] == "Minor"
