"""
ASCII reports for a finished simulation.

Four blocks, each returned as a string (the caller decides where to print):

    lease_chart        stacked chart over time: lease slots on the bottom,
                       waiting (*) and timed-out (!) jobs stacked above
    event_summary      how many events of each kind
    warnings_report    every warning event, one line each
    detailed_timeline  the raw event log, optionally truncated

Example chart (3 leases, one waiter at the peak):

      4 |        *
        ----------------------------
      3 |       ███
      2 |   ████████
      1 |███████████████
        +---------------------------
         0d            1d
"""

from datetime import timedelta

from models.durations import format_duration
from models.enums import EventKind
from models.simulation import Event, TimeSample

_ICONS = {
    EventKind.LEASE_ACQUIRED: "+",
    EventKind.LEASE_RELEASED: "-",
    EventKind.WAITING: "W",
    EventKind.WAIT_TIMEOUT: "T",
    EventKind.EXECUTION_TIMEOUT: "X",
    EventKind.CAPACITY_EXCEEDED: "!",
}


class ChartGenerator:

    def __init__(self, width: int = 80):
        if width < 10:
            raise ValueError("Chart width must be at least 10 columns")
        self.width = width

    @property
    def _plot_width(self) -> int:
        return self.width - 6

    def _header(self, title: str) -> list[str]:
        return ["", title, "=" * self.width, ""]

    # ── lease chart ─────────────────────────────────────────────

    def lease_chart(self, samples: list[TimeSample], max_leases: int) -> str:
        if not samples:
            return "No data to display"

        lines = self._header("Lease Usage Over Time")
        columns = self._columns(samples)
        peak_active = max(sample.active_count for sample in samples)
        # reserved leases can push usage above the configured max
        lease_rows = max(max_leases, peak_active)
        overflow = max(s.waiting_count + s.timeout_count for s in samples)

        # waiting / timeout rows, top to bottom
        for row in range(lease_rows + overflow, lease_rows, -1):
            level = row - lease_rows
            cells = []
            for sample in columns:
                if level <= sample.timeout_count:
                    cells.append("!")
                elif level <= sample.timeout_count + sample.waiting_count:
                    cells.append("*")
                else:
                    cells.append(" ")
            lines.append(f"{row:3d} |" + "".join(cells))

        if overflow > 0:
            lines.append("    " + "-" * (self.width - 4))

        for slot in range(lease_rows, 0, -1):
            cells = "".join("█" if s.active_count >= slot else " " for s in columns)
            lines.append(f"{slot:3d} |" + cells)

        lines.append("    +" + "-" * self._plot_width)
        lines.append("    " + self._day_markers(samples))

        lines += ["", "Legend:", f"  Lease slots (1-{max_leases}):",
                  "    █ - Active lease", "    (space) - Free lease"]
        if lease_rows > max_leases:
            lines.append(f"    rows above {max_leases} - reserved leases in use")
        if overflow > 0:
            lines += [f"  Waiting/Timeout rows (>{lease_rows}):",
                      "    * - Job waiting for lease",
                      "    ! - Job timed out"]
        lines.append("")
        return "\n".join(lines)

    def _columns(self, samples: list[TimeSample]) -> list[TimeSample]:
        """Squeeze (or keep) the samples into at most plot-width columns."""
        count = min(len(samples), self._plot_width)
        if count == 1:
            return [samples[0]]
        return [
            samples[int(x / (count - 1) * (len(samples) - 1))]
            for x in range(count)
        ]

    def _day_markers(self, samples: list[TimeSample]) -> str:
        width = min(len(samples), self._plot_width)
        line = [" "] * width
        total = samples[-1].timestamp - samples[0].timestamp
        day = 0
        while timedelta(days=day) <= total:
            position = 0
            if total > timedelta(0):
                position = int(timedelta(days=day) / total * width)
            marker = f"{day}d"
            if position + len(marker) <= width:
                line[position:position + len(marker)] = marker
            day += 1
        return "".join(line)

    # ── text reports ────────────────────────────────────────────

    def event_summary(self, events: list[Event]) -> str:
        counts = {kind: 0 for kind in EventKind}
        for event in events:
            counts[event.kind] += 1

        lines = self._header("Event Summary")
        lines += [
            f"Total Events: {len(events)}",
            f"  - Leases Acquired: {counts[EventKind.LEASE_ACQUIRED]}",
            f"  - Leases Released: {counts[EventKind.LEASE_RELEASED]}",
            f"  - Jobs Waiting: {counts[EventKind.WAITING]}",
            f"  - Wait Timeouts: {counts[EventKind.WAIT_TIMEOUT]}",
            f"  - Execution Timeouts: {counts[EventKind.EXECUTION_TIMEOUT]}",
            f"  - Max Exceeded: {counts[EventKind.CAPACITY_EXCEEDED]}",
            "",
        ]
        return "\n".join(lines)

    def warnings_report(self, warnings: list[Event]) -> str:
        lines = self._header("Warnings")
        if not warnings:
            lines.append("No warnings!")
            return "\n".join(lines)

        for warning in warnings:
            lines.append(f"[{warning.timestamp:%Y-%m-%d %H:%M:%S}] {warning.message}")
        lines += ["", f"Total Warnings: {len(warnings)}", ""]
        return "\n".join(lines)

    def detailed_timeline(self, events: list[Event], limit: int = 0) -> str:
        truncated = 0 < limit < len(events)
        title = "Detailed Timeline"
        if truncated:
            title += f" (showing first {limit} events)"

        lines = self._header(title)
        shown = events[:limit] if truncated else events
        for event in shown:
            icon = _ICONS.get(event.kind, " ")
            lines.append(
                f"[{event.timestamp:%a %H:%M}] {icon} [{event.active_count_after}] {event.message}"
            )
        if truncated:
            lines += ["", f"... and {len(events) - limit} more events"]
        lines.append("")
        return "\n".join(lines)


def describe_parameters(config) -> str:
    """The 'Loaded configuration' block printed before a run."""
    lines = [
        f"  - Max Active Leases: {config.max_active_leases}",
        f"  - Job Timeout: {format_duration(config.job_timeout_duration)}",
        f"  - Lease Wait Timeout: {format_duration(config.lease_wait_timeout)}",
        f"  - Simulation Duration: {format_duration(config.simulation_duration)}",
        f"  - Jobs: {len(config.jobs)}",
    ]
    if config.reserved_leases:
        lines.insert(1, f"  - Reserved Leases (release jobs): {config.reserved_leases}")
    return "\n".join(lines)
