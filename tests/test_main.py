"""
Tests for the command-line entry point and configuration loading.
"""

import argparse
import json

import pytest

from oscillatord_client import main as cli
from oscillatord_client.errors import ConfigError, TransportError


def _args(**overrides):
    values = dict(address=None, port=None, timeout=None, buffer_size=None)
    values.update(overrides)
    return argparse.Namespace(**values)


class TestLoadConfig:
    """Tests for load_config and apply_overrides."""
    
    def test_defaults_without_file(self):
        config = cli.load_config(None)
        assert config['monitoring']['port'] is None
        assert config['monitoring']['buffer_size'] == 2048
        assert config['monitoring']['timeout'] == 5.0
    
    def test_toml_file(self, tmp_path):
        path = tmp_path / 'client.toml'
        path.write_text('[monitoring]\naddress = "10.0.0.2"\nport = 2970\nbuffer_size = 4096\n')
        config = cli.load_config(str(path))
        assert config['monitoring']['address'] == '10.0.0.2'
        assert config['monitoring']['port'] == 2970
        assert config['monitoring']['buffer_size'] == 4096
        assert config['monitoring']['timeout'] == 5.0
    
    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            cli.load_config(str(tmp_path / 'nope.toml'))
    
    def test_invalid_toml(self, tmp_path):
        path = tmp_path / 'bad.toml'
        path.write_text('[monitoring\nport = ')
        with pytest.raises(ConfigError):
            cli.load_config(str(path))
    
    def test_overrides_win(self):
        config = cli.default_config()
        config['monitoring']['port'] = 1000
        settings = cli.apply_overrides(config, _args(port=2970, address='::1', timeout=0.0))
        assert settings['port'] == 2970
        assert settings['address'] == '::1'
        assert settings['timeout'] == 0.0
    
    @pytest.mark.parametrize('port', [None, 0, 70000, 'abc'])
    def test_bad_port(self, port):
        config = cli.default_config()
        config['monitoring']['port'] = port
        with pytest.raises(ConfigError):
            cli.apply_overrides(config, _args())
    
    def test_bad_buffer_size(self):
        with pytest.raises(ConfigError):
            cli.apply_overrides(cli.default_config(), _args(port=2970, buffer_size=0))


class FakeClient:
    """Stand-in for MonitoringClient returning a canned reply."""
    
    reply = b'{}'
    error = None
    instances = []
    
    def __init__(self, address, port, timeout=None, buffer_size=2048):
        self.address = address
        self.port = port
        self.timeout = timeout
        self.buffer_size = buffer_size
        self.kinds = []
        FakeClient.instances.append(self)
    
    def exchange(self, kind):
        self.kinds.append(kind)
        if self.error:
            raise self.error
        return self.reply


@pytest.fixture
def fake_client(monkeypatch):
    FakeClient.reply = b'{}'
    FakeClient.error = None
    FakeClient.instances = []
    monkeypatch.setattr(cli, 'MonitoringClient', FakeClient)
    return FakeClient


class TestMain:
    """Exit codes and output of main()."""
    
    def test_success(self, fake_client, sample_reply, encode_reply, caplog):
        fake_client.reply = encode_reply(sample_reply)
        with caplog.at_level('INFO'):
            assert cli.main(['-p', '2970', '-r', 'gnss_start']) == cli.EXIT_OK
        client = fake_client.instances[0]
        assert client.port == 2970
        assert client.address is None
        assert [k.value for k in client.kinds] == ['gnss_start']
        assert 'Action requested: gnss_start' in caplog.text
        assert 'Disciplining detected' in caplog.text
        assert 'PASSED !' in caplog.text
    
    def test_default_request_is_none(self, fake_client):
        assert cli.main(['-p', '2970']) == cli.EXIT_OK
        assert [k.value for k in fake_client.instances[0].kinds] == ['none']
    
    def test_json_output(self, fake_client, sample_reply, encode_reply, capsys):
        fake_client.reply = encode_reply({'clock': sample_reply['clock']})
        assert cli.main(['-p', '2970', '--json']) == cli.EXIT_OK
        out = json.loads(capsys.readouterr().out)
        assert out == {'clock': {'clock_class': 'Lock', 'offset_ns': -12}}
    
    def test_missing_port(self, fake_client):
        assert cli.main([]) == cli.EXIT_CONFIG
        assert fake_client.instances == []
    
    def test_unknown_request(self, fake_client):
        assert cli.main(['-p', '2970', '-r', 'reboot']) == cli.EXIT_UNKNOWN_COMMAND
        assert fake_client.instances == []
    
    def test_transport_error(self, fake_client):
        fake_client.error = TransportError('Could not connect to localhost:2970')
        assert cli.main(['-p', '2970']) == cli.EXIT_TRANSPORT
    
    def test_decode_error(self, fake_client):
        fake_client.reply = b'{"gnss": {'
        assert cli.main(['-p', '2970']) == cli.EXIT_DECODE
    
    def test_nan_reply_is_decode_error(self, fake_client, capsys):
        fake_client.reply = b'{"oscillator": {"model": "mRO50", "fine_ctrl": 1, ' \
            b'"coarse_ctrl": 2, "lock": true, "temperature": NaN}}'
        assert cli.main(['-p', '2970', '--json']) == cli.EXIT_DECODE
        assert capsys.readouterr().out == ''
    
    def test_deeply_nested_reply_is_decode_error(self, fake_client):
        fake_client.reply = b'[' * 2048
        assert cli.main(['-p', '2970']) == cli.EXIT_DECODE
    
    def test_missing_field_is_decode_error(self, fake_client):
        fake_client.reply = b'{"clock": {"class": "Lock"}}'
        assert cli.main(['-p', '2970']) == cli.EXIT_DECODE
    
    def test_config_file_supplies_port(self, fake_client, tmp_path):
        path = tmp_path / 'client.toml'
        path.write_text('[monitoring]\nport = 3000\ntimeout = 1.5\n')
        assert cli.main(['-c', str(path)]) == cli.EXIT_OK
        client = fake_client.instances[0]
        assert client.port == 3000
        assert client.timeout == 1.5
