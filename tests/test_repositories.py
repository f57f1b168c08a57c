"""Tests for the flat collection repositories."""
from datetime import date, datetime

import pytest

from cronos import storage
from cronos.availability import default_week, empty_schedule
from cronos.data import seed
from cronos.errors import NotFoundError, ValidationError
from cronos.schemas import Client, CustomField, CustomFieldType, DayException, Service


class TestCollectionRepository:

    def test_save_inserts_then_updates(self, repos):
        svc = Service(id="s1", name="Corte", duration_minutes=45, price=50)
        repos.services.save(svc)
        svc.price = 60
        repos.services.save(svc)

        services = repos.services.list()
        assert len(services) == 1
        assert services[0].price == 60

    def test_get_missing_raises(self, repos):
        with pytest.raises(NotFoundError):
            repos.clients.get("nope")

    def test_delete(self, repos):
        repos.clients.save(Client(id="c1", name="Maria", email="m@x.com", phone="1"))
        repos.clients.save(Client(id="c2", name="João", email="j@x.com", phone="2"))

        repos.clients.delete("c1")

        assert [c.id for c in repos.clients.list()] == ["c2"]


class TestAvailabilityRepository:

    def test_defaults_when_nothing_stored(self, repos):
        assert repos.availability.get_week() == default_week()

    def test_save_week_round_trip(self, repos):
        week = default_week()
        week["sunday"] = week["monday"].model_copy(deep=True)

        repos.availability.save_week(week)

        assert repos.availability.get_week()["sunday"].active is True
        assert repos.availability.resolve(date(2026, 10, 25)).active is True

    def test_save_week_requires_every_day(self, repos):
        week = default_week()
        del week["friday"]

        with pytest.raises(ValidationError, match="friday"):
            repos.availability.save_week(week)

    def test_save_week_rejects_unknown_keys(self, repos):
        week = default_week()
        week["funday"] = week["monday"]

        with pytest.raises(ValidationError, match="funday"):
            repos.availability.save_week(week)

    def test_exception_upsert_by_date(self, repos):
        day = date(2026, 10, 19)
        repos.availability.save_exception(DayException(date=day, schedule=default_week()["monday"]))
        repos.availability.save_exception(DayException(date=day, schedule=empty_schedule()))

        exceptions = repos.availability.list_exceptions()
        assert len(exceptions) == 1
        assert repos.availability.resolve(day).active is False

    def test_delete_exception_restores_template(self, repos):
        day = date(2026, 10, 19)
        repos.availability.save_exception(DayException(date=day, schedule=empty_schedule()))

        repos.availability.delete_exception(day)

        assert repos.availability.resolve(day).active is True

    def test_exception_with_inverted_window_is_rejected(self, repos):
        schedule = default_week()["monday"]
        schedule.morning.end = "08:00"

        with pytest.raises(ValidationError):
            repos.availability.save_exception(DayException(date=date(2026, 10, 19), schedule=schedule))


class TestFormConfig:

    def test_replaces_whole_list(self, repos):
        repos.form_config.save_fields([CustomField(id="f1", label="Alergias")])
        repos.form_config.save_fields([CustomField(id="f2", label="Indicação")])

        assert [f.id for f in repos.form_config.get_fields()] == ["f2"]

    def test_duplicate_ids_rejected(self, repos):
        with pytest.raises(ValidationError):
            repos.form_config.save_fields([
                CustomField(id="f1", label="A"),
                CustomField(id="f1", label="B"),
            ])

    def test_select_needs_options(self, repos):
        with pytest.raises(ValidationError):
            repos.form_config.save_fields([CustomField(id="f1", label="Cor", type=CustomFieldType.select)])


class TestSeed:

    def test_seeds_empty_collections(self, persistence, repos):
        seeded = seed(persistence, now=datetime(2026, 10, 18, 8, 0))

        assert storage.CLIENTS in seeded
        assert len(repos.clients.list()) == 2
        assert len(repos.providers.list()) == 2
        assert repos.events.list()[0].date == datetime(2026, 10, 23, 8, 0)

    def test_does_not_touch_existing_data(self, persistence, repos):
        repos.clients.save(Client(id="c9", name="Only", email="o@x.com", phone="9"))

        seeded = seed(persistence)

        assert storage.CLIENTS not in seeded
        assert [c.id for c in repos.clients.list()] == ["c9"]
