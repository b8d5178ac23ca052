import signal

from kshcore.signals import signal_message, signal_name


def test_signal_zero():
    assert signal_name(0) == "Signal 0"
    assert signal_message(0) == "Signal 0"


def test_common_names():
    assert signal_name(signal.SIGINT) == "INT"
    assert signal_name(signal.SIGTERM) == "TERM"


def test_unknown_name():
    assert signal_name(100000) == "UNKNOWN"


def test_messages_from_table():
    assert signal_message(signal.SIGINT) == "Interrupt"
    assert signal_message(signal.SIGHUP) == "Hangup"


def test_unknown_message_is_nonempty_text():
    text = signal_message(100000)
    assert isinstance(text, str) and len(text) > 0


def test_names_round_trip():
    for sig in signal.valid_signals():
        name = signal_name(int(sig))
        if name != "UNKNOWN":
            assert int(getattr(signal, "SIG" + name)) == int(sig)