"""
Unit Tests for the Ganache Launcher
"""

import sys
import pytest
import asyncio
from unittest.mock import Mock, AsyncMock, call, patch

from devnode.launcher import (
    FORK_URL_TEMPLATE,
    PLACEHOLDER,
    NodeLauncher,
    build_ganache_args,
    default_executable,
    print_output,
    read_node_env,
)


def fake_process(chunks, returncode=0):
    """Process double whose stdout yields the given chunks then EOF"""
    process = Mock()
    process.pid = 4242
    process.stdout.read = AsyncMock(side_effect=list(chunks) + [b''])
    process.wait = AsyncMock(return_value=returncode)
    return process


class TestBuildGanacheArgs:
    """Test argument vector construction"""

    def test_values_in_expected_positions(self):
        args = build_ganache_args('abc123', 'test test junk')

        assert args == [
            '-f', 'https://mainnet.infura.io/v3/abc123',
            '-e', '1000',
            '-m', 'test test junk'
        ]

    def test_unset_values_use_placeholder(self):
        args = build_ganache_args(None, None)

        assert args[1] == FORK_URL_TEMPLATE + 'undefined'
        assert args[5] == PLACEHOLDER

    def test_custom_balance_and_template(self):
        args = build_ganache_args('k', 'm', balance=50, fork_url_template='http://fork/')

        assert args[1] == 'http://fork/k'
        assert args[3] == '50'


class TestReadNodeEnv:
    """Test environment loading"""

    def test_reads_values(self, monkeypatch):
        monkeypatch.setenv('INFURA_API_KEY', 'key')
        monkeypatch.setenv('MNEMONIC', 'word ' * 12)

        env = read_node_env()

        assert env == {'api_key': 'key', 'mnemonic': 'word ' * 12}

    def test_missing_values_warn(self, monkeypatch):
        monkeypatch.delenv('INFURA_API_KEY', raising=False)
        monkeypatch.delenv('MNEMONIC', raising=False)

        with patch('devnode.launcher.logger') as mock_logger:
            env = read_node_env()

        assert env == {'api_key': None, 'mnemonic': None}
        mock_logger.warning.assert_called_once()

    def test_missing_values_strict(self, monkeypatch):
        monkeypatch.setenv('INFURA_API_KEY', 'key')
        monkeypatch.delenv('MNEMONIC', raising=False)

        with pytest.raises(ValueError, match='MNEMONIC'):
            read_node_env(strict=True)


class TestDefaultExecutable:
    """Test executable selection"""

    def test_override(self, monkeypatch):
        monkeypatch.setenv('GANACHE_EXECUTABLE', '/opt/ganache')
        assert default_executable() == '/opt/ganache'

    def test_platform_default(self, monkeypatch):
        monkeypatch.delenv('GANACHE_EXECUTABLE', raising=False)

        monkeypatch.setattr(sys, 'platform', 'win32')
        assert default_executable() == 'ganache-cli.cmd'

        monkeypatch.setattr(sys, 'platform', 'linux')
        assert default_executable() == 'ganache-cli'


class TestNodeLauncher:
    """Test spawn and output relaying"""

    def test_print_output_prefix(self, capsys):
        print_output('Listening on 127.0.0.1:8545')

        assert capsys.readouterr().out == 'stdout: Listening on 127.0.0.1:8545\n'

    @pytest.mark.asyncio
    async def test_spawn_failure_reported_once(self):
        on_error = Mock()
        launcher = NodeLauncher(['-e', '1000'], executable='ganache-cli', on_error=on_error)

        with patch(
            'devnode.launcher.asyncio.create_subprocess_exec',
            AsyncMock(side_effect=FileNotFoundError('ganache-cli'))
        ):
            process = await launcher.start()

        assert process is None
        on_error.assert_called_once()
        assert isinstance(on_error.call_args[0][0], FileNotFoundError)

    @pytest.mark.asyncio
    async def test_default_error_logs_to_stderr_logger(self):
        launcher = NodeLauncher([], executable='definitely-not-a-real-ganache-binary')

        with patch('devnode.launcher.logger') as mock_logger:
            returncode = await launcher.run()

        assert returncode is None
        assert mock_logger.method_calls == [call.error("Failed to start subprocess.")]

    @pytest.mark.asyncio
    async def test_passes_args_to_executable(self):
        process = fake_process([])

        with patch(
            'devnode.launcher.asyncio.create_subprocess_exec',
            AsyncMock(return_value=process)
        ) as spawn:
            launcher = NodeLauncher(['-f', 'url', '-e', '1000'], executable='ganache-cli')
            await launcher.start()

        assert spawn.call_args[0] == ('ganache-cli', '-f', 'url', '-e', '1000')
        assert spawn.call_args[1]["stdout"] == asyncio.subprocess.PIPE
        assert spawn.call_args[1]["stderr"] == asyncio.subprocess.DEVNULL

    @pytest.mark.asyncio
    async def test_relays_chunks_in_order(self):
        received = []
        launcher = NodeLauncher([], executable='ganache-cli', on_output=received.append)

        await launcher.relay_output(fake_process([b'Ganache CLI v6', b'\nAvailable Accounts', b'\n(0) 0xabc']))

        assert received == ['Ganache CLI v6', '\nAvailable Accounts', '\n(0) 0xabc']

    @pytest.mark.asyncio
    async def test_split_multibyte_character(self):
        received = []
        launcher = NodeLauncher([], executable='ganache-cli', on_output=received.append)
        encoded = 'Ξ balance'.encode('utf-8')

        await launcher.relay_output(fake_process([encoded[:1], encoded[1:]]))

        assert ''.join(received) == 'Ξ balance'

    @pytest.mark.asyncio
    async def test_run_returns_exit_code(self):
        received = []
        process = fake_process([b'done'], returncode=3)

        with patch('devnode.launcher.asyncio.create_subprocess_exec', AsyncMock(return_value=process)):
            launcher = NodeLauncher([], executable='ganache-cli', on_output=received.append)
            returncode = await launcher.run()

        assert returncode == 3
        assert received == ['done']

    @pytest.mark.asyncio
    async def test_real_child_process(self):
        received = []
        launcher = NodeLauncher(
            ['-c', 'print("eth_blockNumber")'],
            executable=sys.executable,
            on_output=received.append
        )

        returncode = await launcher.run()

        assert returncode == 0
        assert ''.join(received).strip() == 'eth_blockNumber'

    @pytest.mark.asyncio
    async def test_child_stderr_not_relayed(self, capfd):
        received = []
        launcher = NodeLauncher(
            ['-c', 'import sys; sys.stderr.write("fork warning\\n"); print("ready")'],
            executable=sys.executable,
            on_output=received.append
        )

        returncode = await launcher.run()

        assert returncode == 0
        assert ''.join(received).strip() == 'ready'
        assert 'fork warning' not in capfd.readouterr().err


# Run tests
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
