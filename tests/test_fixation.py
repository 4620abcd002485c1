from gazekeys.eye.fixation import FixationDetector

def test_disabled_always_fixating():
    fd = FixationDetector(enabled=False)
    assert fd.fixating
    assert fd.update(0, 0, 1/60, 1.0) is False
    assert fd.update(900, 900, 1/60, 1.02) is False
    assert fd.fixating

def test_fixation_needs_min_duration():
    fd = FixationDetector(vt_thresh=400, alpha=0.3, min_fix_s=0.1)
    fd.update(100, 100, 1/60, 1.0)
    fd.update(100, 100, 1/60, 1.05)
    assert not fd.fixating and fd.state() == "settling"
    fd.update(101, 100, 1/60, 1.15)
    assert fd.fixating and fd.state() == "fixation"
    assert fd.fixation_s(1.2) > 0

def test_scan_onset_reported_once():
    fd = FixationDetector(vt_thresh=400, alpha=0.3, min_fix_s=0.05)
    for i in range(10):
        fd.update(100, 100, 1/60, 1.0 + i/60)
    assert fd.fixating
    assert fd.update(600, 100, 1/60, 1.2) is True
    assert not fd.fixating and fd.state() == "saccade"
    assert fd.update(1100, 100, 1/60, 1.22) is False

def test_reset():
    fd = FixationDetector(min_fix_s=0.0)
    fd.update(0, 0, 1/60, 1.0)
    assert fd.fixating
    fd.reset()
    assert not fd.fixating and fd.velocity == 0.0
