"""
Unit tests for the command line interface.
"""

import pytest
from cryptography.fernet import Fernet

from portal import cli
from portal.services.passwords import verify_password


class TestCli:
    def test_generate_key(self, capsys):
        assert cli.main(["generate-key"]) == 0
        key = capsys.readouterr().out.strip().splitlines()[0]
        Fernet(key.encode())

    def test_hash_password(self, capsys):
        assert cli.main(["hash-password", "s3cret!"]) == 0
        hashed = capsys.readouterr().out.strip()
        assert verify_password("s3cret!", hashed) is True

    def test_command_required(self):
        with pytest.raises(SystemExit):
            cli.main([])

    def test_encrypt_secrets_needs_key(self, capsys):
        assert cli.main(["encrypt-secrets"]) == 1
        assert "PORTAL_KMS_MASTER_KEY" in capsys.readouterr().err

    def test_seed_rejects_unusable_tenant_id(self, capsys):
        assert cli.main(["seed", "--tenant", "***"]) == 1
        assert "Invalid tenant id" in capsys.readouterr().err
