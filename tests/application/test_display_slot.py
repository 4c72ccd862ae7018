import threading

from huginn_metrics.application.display_slot import SeriesDisplaySlot
from huginn_metrics.domain.entities import Series
from huginn_metrics.domain.metrics import ChartType, Metric, Period


def _series(metric: Metric) -> Series:
    return Series(
        metric=metric,
        period=Period.WEEK,
        labels=("1/1",),
        points=(1.0,),
        chart_type=ChartType.LINE,
    )


def test_latest_request_wins_over_slow_earlier_request():
    slot = SeriesDisplaySlot()
    weight_ticket = slot.begin()
    steps_ticket = slot.begin()

    assert slot.publish(steps_ticket, _series(Metric.STEPS)) is True
    assert slot.publish(weight_ticket, _series(Metric.WEIGHT)) is False
    assert slot.current.metric is Metric.STEPS


def test_loading_clears_only_for_the_current_request():
    slot = SeriesDisplaySlot()
    first = slot.begin()
    second = slot.begin()

    slot.publish(first, _series(Metric.WEIGHT))
    assert slot.loading
    assert slot.current is None

    slot.publish(second, _series(Metric.STEPS))
    assert not slot.loading


def test_failed_current_request_clears_the_display():
    slot = SeriesDisplaySlot()
    slot.publish(slot.begin(), _series(Metric.WEIGHT))

    ticket = slot.begin()
    assert slot.publish(ticket, None) is True
    assert slot.current is None


def test_tickets_are_monotonic_across_threads():
    slot = SeriesDisplaySlot()
    tickets = []
    lock = threading.Lock()

    def worker():
        for _ in range(50):
            ticket = slot.begin()
            with lock:
                tickets.append(ticket)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(tickets) == list(range(1, 201))
    assert slot.latest_ticket == 200
    assert slot.is_current(200)
    assert not slot.is_current(199)
