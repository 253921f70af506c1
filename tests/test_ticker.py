from time_compass.focus_timer import FocusTimerLogic, Phase
from time_compass.ticker import Ticker


class TestTicker:
    def test_fires_and_reschedules(self, scheduler):
        calls = []
        ticker = Ticker(scheduler, lambda: calls.append(1))
        ticker.start()
        assert len(scheduler.jobs) == 1

        scheduler.run_pending()
        scheduler.run_pending()
        assert calls == [1, 1]
        assert len(scheduler.jobs) == 1

    def test_start_twice_keeps_one_job(self, scheduler):
        ticker = Ticker(scheduler, lambda: None)
        ticker.start()
        ticker.start()
        assert len(scheduler.jobs) == 1

    def test_cancel_drops_pending_job(self, scheduler):
        calls = []
        ticker = Ticker(scheduler, lambda: calls.append(1))
        ticker.start()
        ticker.cancel()
        assert not ticker.running
        assert scheduler.jobs == {}
        assert len(scheduler.cancelled) == 1
        scheduler.run_pending()
        assert calls == []

    def test_cancel_when_idle_is_noop(self, scheduler):
        Ticker(scheduler, lambda: None).cancel()
        assert scheduler.cancelled == []

    def test_callback_can_cancel_its_ticker(self, scheduler):
        holder = {}

        def once():
            holder["ticker"].cancel()

        holder["ticker"] = Ticker(scheduler, once)
        holder["ticker"].start()
        scheduler.run_pending()
        assert scheduler.jobs == {}
        assert not holder["ticker"].running

    def test_context_manager_cancels_on_exit(self, scheduler):
        with Ticker(scheduler, lambda: None) as ticker:
            assert ticker.running
        assert not ticker.running
        assert scheduler.jobs == {}

    def test_tickers_are_independent(self, scheduler):
        clock_calls, focus_calls = [], []
        clock = Ticker(scheduler, lambda: clock_calls.append(1), name="clock")
        focus = Ticker(scheduler, lambda: focus_calls.append(1), name="focus")
        clock.start()
        focus.start()
        scheduler.run_pending()
        focus.cancel()
        scheduler.run_pending()
        assert clock_calls == [1, 1]
        assert focus_calls == [1]


class TestTickerDrivesFocusTimer:
    def test_countdown_stops_its_ticker_when_finished(self, scheduler, fake_alerts):
        timer = FocusTimerLogic(1, alerts=fake_alerts)
        holder = {}

        def on_tick():
            timer.tick()
            if not timer.running:
                holder["ticker"].cancel()

        holder["ticker"] = Ticker(scheduler, on_tick, name="focus")
        timer.start()
        holder["ticker"].start()
        for _ in range(70):
            scheduler.run_pending()

        assert timer.phase == Phase.FINISHED
        assert timer.remaining == 0
        assert not holder["ticker"].running
        assert fake_alerts.tones == 1
