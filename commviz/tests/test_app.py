import os

import pytest

from streamlit.testing.v1 import AppTest

from commviz.utils import MAX_FS, MAX_SAMPLES, MAX_TB

APP_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "app.py")


def run_app(**state) -> AppTest:
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    for k, v in state.items():
        at.session_state[k] = v
    return at.run()


def test_line_coding_default_renders():
    at = run_app()
    assert not at.exception
    assert not at.error
    assert any("NRZ-L encoding of 10110010" in h.value for h in at.subheader)


def test_invalid_bitstring_shows_error():
    at = run_app(bitstr="10a1")
    assert not at.exception
    assert any("only 0 and 1" in e.value for e in at.error)


@pytest.mark.parametrize("scheme", ["ASK", "FSK", "PSK"])
def test_modulation_mode_renders(scheme):
    at = AppTest.from_file(APP_PATH, default_timeout=30).run()
    at.selectbox(key="mode").set_value("Modulation").run()
    at.selectbox(key="d2a_scheme").set_value(scheme).run()
    assert not at.exception
    assert any(f"{scheme} Modulation Plots" in h.value for h in at.subheader)
    # 8 bits * 100 samples is padded to 1024
    assert any("Padding signal from 800 to 1024" in w.value for w in at.warning)


def test_modulation_inputs_are_bounded():
    at = AppTest.from_file(APP_PATH, default_timeout=30).run()
    at.selectbox(key="mode").set_value("Modulation").run()
    assert at.number_input(key="d2a_tb").min == pytest.approx(0.001)
    assert at.number_input(key="d2a_tb").max == pytest.approx(MAX_TB)
    assert at.number_input(key="d2a_fs").max == pytest.approx(MAX_FS)
    assert at.number_input(key="d2a_fc").min > 0
    assert at.number_input(key="d2a_ac").min > 0


def test_modulation_refuses_oversized_signal():
    at = AppTest.from_file(APP_PATH, default_timeout=30).run()
    at.selectbox(key="mode").set_value("Modulation").run()
    # 8 bits x 10 s x 5000 Hz = 400000 samples
    at.number_input(key="d2a_tb").set_value(MAX_TB).run()
    at.number_input(key="d2a_fs").set_value(MAX_FS).run()
    assert not at.exception
    assert any(f"more than {MAX_SAMPLES} samples" in e.value for e in at.error)
    assert not any("Modulation Plots" in h.value for h in at.subheader)
