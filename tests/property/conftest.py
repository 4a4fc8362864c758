"""Hypothesis strategies for property-based testing."""

from hypothesis import strategies as st


@st.composite
def generate_clock(draw):
    """Random ``[[HH:]MM:]SS.ff`` string with its expected milliseconds."""
    hours = draw(st.integers(min_value=0, max_value=99))
    minutes = draw(st.integers(min_value=0, max_value=59))
    seconds = draw(st.integers(min_value=0, max_value=59))
    centis = draw(st.integers(min_value=0, max_value=99))
    groups = draw(st.integers(min_value=1, max_value=3))

    if groups == 3:
        text = f"{hours:02d}:{minutes:02d}:{seconds:02d}.{centis:02d}"
    elif groups == 2:
        hours = 0
        text = f"{minutes:02d}:{seconds:02d}.{centis:02d}"
    else:
        hours = minutes = 0
        text = f"{seconds:02d}.{centis:02d}"

    expected = centis * 10 + seconds * 1000 + minutes * 60_000 + hours * 3_600_000
    return text, expected


def _maybe(strategy):
    return st.one_of(st.just("N/A"), strategy)


@st.composite
def generate_progress_batch(draw):
    """Random progress batch lines, including N/A and odd values."""
    lines = []
    if draw(st.booleans()):
        lines.append(f"frame={draw(st.integers(min_value=0, max_value=10**6))}")
    lines.append(
        "out_time_us="
        + draw(_maybe(st.integers(min_value=0, max_value=10**10).map(str)))
    )
    speed = draw(
        _maybe(
            st.floats(min_value=0, max_value=100, allow_nan=False).map(lambda s: f"{s:.3f}x")
        )
    )
    lines.append(f"speed={speed}")
    lines.append(
        "bitrate="
        + draw(_maybe(st.floats(min_value=0, max_value=10**5).map(lambda b: f"{b:.1f}kbits/s")))
    )
    lines.append(f"progress={draw(st.sampled_from(['continue', 'end']))}")
    return lines


durations = st.one_of(st.none(), st.integers(min_value=1, max_value=10**8))
