import unittest

from place_autocomplete.config.models import AutocompleteSettings
from place_autocomplete.core.models import CommitReason, LocationData, SchedulerMode
from place_autocomplete.scheduler.acceptance import SelectionAcceptanceHandler
from place_autocomplete.scheduler.scheduler import RequestScheduler
from tests.helpers import ControlledProvider, FakeClock, RecordingListener, make_suggestion, settle

LISBON_URL = "https://www.google.com/maps/search/?api=1&query=Lisbon%2C%20Portugal"


class SelectionAcceptanceHandlerTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()
        self.provider = ControlledProvider(clock=self.clock)
        self.scheduler = RequestScheduler(
            provider=self.provider,
            settings=AutocompleteSettings(),
            listener=RecordingListener(),
            sleep=self.clock.sleep,
        )
        self.emitted: list[LocationData] = []
        self.handler = SelectionAcceptanceHandler(scheduler=self.scheduler, sink=self.emitted.append)
        self.lisbon = make_suggestion("Lisbon, Portugal", coordinates=(-9.1393, 38.7223))

    async def asyncTearDown(self) -> None:
        self.scheduler.close()
        await settle()

    async def test_accept_forwards_resolved_location(self) -> None:
        self.scheduler.on_text_changed("Lis")
        await self.clock.advance(0.5)

        location = self.handler.accept(self.lisbon)

        expected = LocationData(
            display_name="Lisbon, Portugal",
            input="Lisbon, Portugal",
            coordinates=(-9.1393, 38.7223),
            derived_url=LISBON_URL,
        )
        self.assertEqual(location, expected)
        self.assertEqual(self.emitted, [expected])
        self.assertIs(self.scheduler.mode, SchedulerMode.SUPPRESSED)
        self.assertEqual(self.scheduler.session.raw_text, "Lisbon, Portugal")

        await self.clock.advance(5.0)
        self.assertEqual(self.provider.queries, ["Lis"])

    async def test_commit_of_accepted_text_keeps_coordinates(self) -> None:
        self.handler.accept(self.lisbon)
        self.scheduler.on_text_changed("Lisbon, Portugal")

        location = self.handler.commit(reason=CommitReason.ENTER)

        self.assertIsNotNone(location)
        self.assertEqual(location.coordinates, (-9.1393, 38.7223))
        self.assertEqual(location.derived_url, LISBON_URL)
        self.assertIs(self.scheduler.mode, SchedulerMode.SUPPRESSED)

    async def test_commit_of_edited_text_drops_coordinates(self) -> None:
        self.handler.accept(self.lisbon)
        self.scheduler.on_text_changed("Lisbon, Portugal ")

        location = self.handler.commit(reason=CommitReason.BLUR)

        self.assertEqual(location.display_name, "Lisbon, Portugal ")
        self.assertEqual(location.input, "Lisbon, Portugal ")
        self.assertIsNone(location.coordinates)
        self.assertEqual(location.derived_url, LISBON_URL)
        self.assertIs(self.scheduler.mode, SchedulerMode.IDLE)
        self.assertFalse(self.scheduler.timers.initial_pending)

    async def test_retyping_accepted_text_after_edit_stays_unresolved(self) -> None:
        self.handler.accept(self.lisbon)
        self.scheduler.on_text_changed("Lisbon, Portuga")
        self.scheduler.on_text_changed("Lisbon, Portugal")

        location = self.handler.commit(reason=CommitReason.ESCAPE)
        self.assertIsNone(location.coordinates)

    async def test_commit_free_text_has_derived_url_only(self) -> None:
        self.scheduler.on_text_changed("Rua Augusta 100")
        location = self.handler.commit()

        self.assertIsNone(location.coordinates)
        self.assertEqual(
            location.derived_url,
            "https://www.google.com/maps/search/?api=1&query=Rua%20Augusta%20100",
        )
        await self.clock.advance(5.0)
        self.assertEqual(self.provider.calls, [])

    async def test_commit_blank_text_emits_nothing(self) -> None:
        self.scheduler.on_text_changed("   ")
        self.assertIsNone(self.handler.commit())
        self.assertEqual(self.emitted, [])

    async def test_restore_with_coordinates_is_treated_as_accepted(self) -> None:
        saved = LocationData(
            display_name="Lisbon, Portugal",
            input="Lisbon, Portugal",
            coordinates=(-9.1393, 38.7223),
            derived_url=LISBON_URL,
        )
        self.handler.restore(saved)
        self.scheduler.on_text_changed("Lisbon, Portugal")
        await self.clock.advance(5.0)

        self.assertEqual(self.provider.calls, [])
        self.assertIs(self.scheduler.mode, SchedulerMode.SUPPRESSED)
        self.assertEqual(self.handler.commit().coordinates, (-9.1393, 38.7223))
        self.assertEqual(self.emitted, [LocationData("Lisbon, Portugal", "Lisbon, Portugal", (-9.1393, 38.7223), LISBON_URL)])

    async def test_restore_free_text_does_not_query(self) -> None:
        self.handler.restore(LocationData(display_name="Somewhere nice", input="Somewhere nice"))
        await self.clock.advance(5.0)

        self.assertEqual(self.provider.calls, [])
        self.assertIsNone(self.handler.commit().coordinates)

    async def test_failing_sink_is_logged(self) -> None:
        def broken_sink(location: LocationData) -> None:
            raise RuntimeError("form rejected value")

        handler = SelectionAcceptanceHandler(scheduler=self.scheduler, sink=broken_sink)
        with self.assertLogs("place_autocomplete.scheduler.acceptance", level="ERROR"):
            location = handler.accept(self.lisbon)
        self.assertEqual(location.display_name, "Lisbon, Portugal")
        self.assertIs(self.scheduler.mode, SchedulerMode.SUPPRESSED)


if __name__ == "__main__":
    unittest.main()
