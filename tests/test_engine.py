"""
Tests for engine.py - host callbacks driving the watch face.

Covers:
  - The tap cycle end to end (TOUCH then 41 draws)
  - Ambient entry mid-animation
  - Mute toggling through the interruption filter
  - Time zone subscription lifecycle
  - Invalid surfaces, shape-specific overlay, startup failures
  - Frame scheduling and coalescing
"""

import pytest
from datetime import timedelta, timezone

from smiley_watchface.config import AnimationConfig, WatchFaceConfig
from smiley_watchface.display.animation import TapType
from smiley_watchface.display.assets import Background
from smiley_watchface.display.geometry import Rect, Surface
from smiley_watchface.display.modes import DisplayMode, InterruptionFilter
from smiley_watchface.engine import WatchFaceStyle
from smiley_watchface.errors import AssetLoadFailure, ConfigError
from smiley_watchface.host import PilResourceService

from conftest import RecordingCanvas, make_engine, make_frames


def draw(engine):
    canvas = RecordingCanvas()
    return canvas, engine.on_draw(canvas)


class TestTapCycle:
    """TOUCH then 41 draws on a 320x320 interactive face."""

    def test_background_sequence(self, engine):
        engine.on_tap(TapType.TOUCH, 160, 160, 0)
        shown = [draw(engine)[1].background for _ in range(41)]

        expected = (
            [Background.BG1] * 10 + [Background.BG2] * 10
            + [Background.BG3] * 10 + [Background.BG4] * 10
            + [Background.BG0]
        )
        assert shown == expected

    def test_idle_after_forty_draws(self, engine):
        engine.on_tap(TapType.TOUCH, 160, 160, 0)
        for _ in range(40):
            draw(engine)
        assert engine.taps.animation.is_idle
        assert not engine.taps.armed

    def test_second_touch_stops_cycle(self, engine):
        engine.on_tap(TapType.TOUCH, 160, 160, 0)
        draw(engine)
        engine.on_tap(TapType.TOUCH, 160, 160, 10)
        _, result = draw(engine)
        assert result.background is Background.BG0

    def test_playing_schedules_frame_delay(self, engine, timer):
        engine.on_tap(TapType.TOUCH, 160, 160, 0)
        _, result = draw(engine)
        assert result.next_frame_delay_ms == 50
        assert timer.next_due() == 50

    def test_taps_invalidate(self, engine):
        before = engine.invalidation_count
        engine.on_tap(TapType.TAP, 1, 1, 0)
        engine.on_tap(TapType.TOUCH_CANCEL, 1, 1, 0)
        assert engine.invalidation_count == before + 2
        assert engine.taps.counters.tap == 1
        assert engine.taps.counters.touch_cancel == 1

    def test_overlay_shows_counts(self, engine):
        engine.on_tap(TapType.TAP, 1, 1, 0)
        canvas, _ = draw(engine)
        texts = [call[1] for call in canvas.of("draw_text")]
        assert texts == ["TAP: 1", "CANCEL: 0"]


class TestAmbientEntry:
    """Entering ambient mid-animation."""

    def test_gray_no_second_hand_animation_frozen(self, engine, timer):
        engine.on_tap(TapType.TOUCH, 160, 160, 0)
        for _ in range(15):
            draw(engine)
        assert engine.taps.animation.phase == 75

        engine.on_ambient_mode_changed(True)
        assert not engine.scheduler.pending

        canvas, result = draw(engine)
        assert result.background is Background.GRAY
        assert not result.second_hand
        assert len(canvas.of("draw_line")) == 2
        assert all(call[5].shadow is None for call in canvas.of("draw_line"))
        assert engine.taps.animation.playing
        assert engine.taps.animation.phase == 75
        assert result.next_frame_delay_ms is None
        assert timer.pending == 0

    def test_ambient_invalidates(self, engine):
        before = engine.invalidation_count
        engine.on_ambient_mode_changed(True)
        assert engine.invalidation_count == before + 1
        assert engine.mode is DisplayMode.AMBIENT_NORMAL

    def test_leaving_ambient_resumes(self, engine):
        engine.on_tap(TapType.TOUCH, 160, 160, 0)
        for _ in range(15):
            draw(engine)
        engine.on_ambient_mode_changed(True)
        draw(engine)
        engine.on_ambient_mode_changed(False)

        _, result = draw(engine)
        assert result.background is Background.BG2
        assert engine.taps.animation.phase == 80

    def test_burn_in_ambient_is_black(self, engine):
        engine.on_properties_changed(low_bit=False, burn_in=True)
        engine.on_ambient_mode_changed(True)
        canvas, result = draw(engine)
        assert result.background is Background.BLACK
        assert canvas.of("draw_bitmap") == []
        assert engine.assets.gray_bg0 is None

    def test_time_tick_invalidates(self, engine):
        engine.on_ambient_mode_changed(True)
        before = engine.invalidation_count
        engine.on_time_tick()
        assert engine.invalidation_count == before + 1

    def test_peek_card(self, engine):
        engine.on_peek_card_position_update((0, 250, 320, 320))
        engine.on_ambient_mode_changed(True)
        canvas, _ = draw(engine)
        (_, rect, _), = canvas.of("draw_rect")
        assert rect == Rect(0, 250, 320, 320)


class TestMuteToggle:
    """Interruption filter NONE dims the hands."""

    def test_toggle(self, engine):
        before = engine.invalidation_count

        engine.on_interruption_filter_changed(InterruptionFilter.NONE)
        profile = engine.display_mode.paint_profile
        assert (profile.hour.alpha, profile.minute.alpha, profile.second.alpha) == (100, 100, 80)
        assert engine.invalidation_count == before + 1

        engine.on_interruption_filter_changed(InterruptionFilter.NONE)
        assert engine.invalidation_count == before + 1

        engine.on_interruption_filter_changed(InterruptionFilter.ALL)
        profile = engine.display_mode.paint_profile
        assert (profile.hour.alpha, profile.minute.alpha, profile.second.alpha) == (255, 255, 255)
        assert engine.invalidation_count == before + 2

    def test_muted_draw(self, engine):
        engine.on_interruption_filter_changed(3)
        canvas, _ = draw(engine)
        assert [call[5].alpha for call in canvas.of("draw_line")] == [100, 100, 80]


class TestTimeZone:
    """Zone-change subscription follows visibility."""

    def test_subscribed_while_visible(self, engine, time_service):
        assert time_service.subscriber_count == 1

    def test_visible_twice_subscribes_once(self, engine, time_service):
        engine.on_visibility_changed(True)
        assert time_service.subscriber_count == 1

    def test_hidden_unsubscribes(self, engine, time_service):
        engine.on_visibility_changed(False)
        assert time_service.subscriber_count == 0

    def test_destroy_unsubscribes(self, engine, time_service):
        engine.on_destroy()
        assert time_service.subscriber_count == 0

    def test_zone_change_refreshes_and_invalidates(self, engine, time_service):
        before = engine.invalidation_count
        zone = timezone(timedelta(hours=2))
        time_service.set_time_zone(zone)
        assert engine.clock.tz == zone
        assert engine.invalidation_count == before + 1

    def test_zone_change_moves_hands(self, engine, time_service):
        _, before = draw(engine)
        time_service.set_time_zone(timezone(timedelta(hours=1)))
        _, after = draw(engine)
        assert after.angles.hour == pytest.approx(before.angles.hour + 30.0)

    def test_zone_refreshed_on_becoming_visible(self, engine, time_service):
        engine.on_visibility_changed(False)
        zone = timezone(timedelta(hours=-4))
        time_service.set_time_zone(zone)
        assert engine.clock.tz == timezone.utc

        engine.on_visibility_changed(True)
        assert engine.clock.tz == zone


class TestSurface:
    """Surface changes."""

    def test_hand_lengths(self, engine):
        assert engine.hand_lengths.hour == 80.0
        assert engine.hand_lengths.minute == 120.0
        assert engine.hand_lengths.second == 140.0

    def test_backgrounds_scaled(self, engine):
        assert engine.assets.bitmap(Background.BG0).width == 320

    def test_invalid_surface_draw_is_noop(self, engine):
        engine.on_surface_changed(0, 0)
        canvas, result = draw(engine)
        assert result is None
        assert canvas.calls == []
        assert engine.assets.bitmap(Background.BG0).width == 320

    def test_valid_surface_after_invalid(self, engine):
        engine.on_surface_changed(0, 0)
        engine.on_surface_changed(280, 280)
        _, result = draw(engine)
        assert result is not None
        assert engine.assets.bitmap(Background.BG0).width == 280

    def test_draw_before_surface(self, resources, time_service, timer):
        eng = make_engine(resources, time_service, timer)
        eng.on_create()
        assert draw(eng)[1] is None

    def test_create_with_surface(self, resources, time_service, timer):
        eng = make_engine(resources, time_service, timer)
        eng.on_create(Surface(320, 320, is_round=True))
        assert eng.is_round
        assert eng.surface == Surface(320, 320, True)

    def test_low_bit_drops_gray(self, engine):
        assert engine.assets.gray_bg0 is not None
        engine.on_properties_changed(low_bit=True, burn_in=False)
        assert engine.assets.gray_bg0 is None


class TestShape:
    """Overlay offsets per screen shape."""

    def test_offsets_zero_before_shape(self, engine):
        assert (engine.text_overlay.x_offset, engine.text_overlay.y_offset) == (0, 0)
        assert engine.text_overlay.spacing == 20.0

    def test_round(self, engine):
        engine.on_apply_shape(True)
        overlay = engine.text_overlay
        assert (overlay.x_offset, overlay.y_offset) == (40.0, 70.0)
        assert overlay.paint.text_size == 24.0
        assert engine.surface.is_round

    def test_square(self, engine):
        engine.on_apply_shape(False)
        overlay = engine.text_overlay
        assert (overlay.x_offset, overlay.y_offset) == (15.0, 60.0)
        assert overlay.paint.text_size == 20.0

    def test_custom_dimensions(self, frames, time_service, timer):
        resources = PilResourceService(bitmaps=frames, dimensions={"interactive_x_offset": 5.0})
        eng = make_engine(resources, time_service, timer)
        eng.on_create()
        eng.on_apply_shape(False)
        assert eng.text_overlay.x_offset == 5.0


class TestLifecycle:
    """Creation, configuration and teardown."""

    def test_style(self, resources, time_service, timer):
        style = make_engine(resources, time_service, timer).on_create()
        assert style == WatchFaceStyle()
        assert style.accepts_tap_events
        assert not style.show_system_ui_time

    def test_missing_asset_fails_startup(self, time_service, timer):
        frames = make_frames()
        del frames["smiley5"]
        eng = make_engine(PilResourceService(bitmaps=frames), time_service, timer)
        with pytest.raises(AssetLoadFailure):
            eng.on_create()
        assert not eng.assets.is_loaded

    def test_invalid_config(self, resources, time_service, timer):
        config = WatchFaceConfig(animation=AnimationConfig(frame_step=0))
        with pytest.raises(ConfigError):
            make_engine(resources, time_service, timer, config=config)

    def test_config_drives_animation(self, resources, time_service, timer):
        config = WatchFaceConfig(animation=AnimationConfig(frame_step=50, frame_delay_ms=20))
        eng = make_engine(resources, time_service, timer, config=config)
        eng.on_create(Surface(320, 320))
        eng.on_visibility_changed(True)
        eng.on_tap(TapType.TOUCH, 0, 0, 0)

        shown = [draw(eng)[1] for _ in range(5)]
        assert [r.background for r in shown] == [
            Background.BG1, Background.BG2, Background.BG3, Background.BG4, Background.BG0,
        ]
        assert shown[0].next_frame_delay_ms == 20

    def test_destroy_cancels_pending_frame(self, engine, timer):
        draw(engine)
        assert engine.scheduler.pending
        engine.on_destroy()
        assert timer.pending == 0


class TestScheduling:
    """Self-scheduled invalidations."""

    def test_idle_draw_requests_immediate_frame(self, resources, time_service, timer):
        calls = []
        eng = make_engine(resources, time_service, timer, invalidate_callback=lambda: calls.append(1))
        eng.on_create(Surface(320, 320))
        eng.on_visibility_changed(True)
        calls.clear()

        draw(eng)
        assert timer.next_due() == 0
        timer.advance()
        assert calls == [1]

    def test_hidden_cancels_pending(self, engine, timer):
        draw(engine)
        engine.on_visibility_changed(False)
        assert not engine.scheduler.pending
        assert timer.pending == 0

    def test_not_visible_draw_schedules_nothing(self, engine, timer):
        engine.on_visibility_changed(False)
        _, result = draw(engine)
        assert result.next_frame_delay_ms is None
        assert timer.pending == 0

    def test_only_one_pending(self, engine, timer):
        draw(engine)
        draw(engine)
        draw(engine)
        assert timer.pending == 1

    def test_fire_during_draw_coalesced(self, engine, timer):
        engine.on_tap(TapType.TOUCH, 0, 0, 0)
        draw(engine)
        before = engine.invalidation_count

        class SlowCanvas(RecordingCanvas):
            def draw_circle(self, x, y, radius, paint):
                timer.advance(50)
                super().draw_circle(x, y, radius, paint)

        engine.on_draw(SlowCanvas())
        assert engine.scheduler.coalesced == 1
        assert engine.invalidation_count == before
        assert engine.scheduler.pending
