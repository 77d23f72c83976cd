from taskboard_server.utils.otp import generate_otp


def test_otp_is_six_digits():
    for _ in range(50):
        otp = generate_otp()
        assert len(otp) == 6
        assert otp.isdigit()


def test_otp_length_is_configurable():
    assert len(generate_otp(8)) == 8
