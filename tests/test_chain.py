from types import SimpleNamespace

import pytest
from solana.rpc.core import UnconfirmedTxError
from solders.hash import Hash
from solders.keypair import Keypair
from solders.signature import Signature
from solders.transaction import Transaction

from chain import ChainGateway
from exceptions import ChainSubmissionError


class FakeClient:
    def __init__(self, status_err=None, reject=False, confirm_error=None):
        self.status_err = status_err
        self.reject = reject
        self.confirm_error = confirm_error
        self.sent = []
        self.confirmed = []

    def get_latest_blockhash(self):
        return SimpleNamespace(value=SimpleNamespace(blockhash=Hash.new_unique()))

    def send_transaction(self, tx):
        if self.reject:
            raise RuntimeError("blockhash not found")
        self.sent.append(tx)
        return SimpleNamespace(value=tx.signatures[0])

    def send_raw_transaction(self, raw):
        if self.reject:
            raise RuntimeError("invalid transaction")
        self.sent.append(raw)
        return SimpleNamespace(value=Signature.default())

    def confirm_transaction(self, signature):
        self.confirmed.append(signature)
        if self.confirm_error is not None:
            raise self.confirm_error
        return SimpleNamespace(value=[SimpleNamespace(err=self.status_err)])

    def is_connected(self):
        return True


def test_send_sol_signs_transfer_and_waits_for_confirmation():
    client = FakeClient()
    sender = Keypair()
    receiver = Keypair().pubkey()

    signature = ChainGateway(client).send_sol(sender, str(receiver), 0.001)

    tx = client.sent[0]
    assert isinstance(tx, Transaction)
    tx.verify()
    assert tx.message.account_keys[0] == sender.pubkey()
    assert receiver in tx.message.account_keys
    assert client.confirmed == [tx.signatures[0]]
    assert signature == str(tx.signatures[0])


def test_send_sol_rejected_raises_chain_error():
    with pytest.raises(ChainSubmissionError):
        ChainGateway(FakeClient(reject=True)).send_sol(Keypair(), str(Keypair().pubkey()), 0.001)


def test_submit_and_confirm_returns_signature_string():
    client = FakeClient()

    assert ChainGateway(client).submit_and_confirm(b"raw") == str(Signature.default())
    assert client.sent == [b"raw"]


def test_failed_on_chain_status_raises():
    with pytest.raises(ChainSubmissionError):
        ChainGateway(FakeClient(status_err="InstructionError")).submit_and_confirm(b"raw")


def test_is_connected():
    assert ChainGateway(FakeClient()).is_connected() is True


def test_confirmation_timeout_raises_chain_error_on_submit():
    client = FakeClient(confirm_error=UnconfirmedTxError("Unable to confirm transaction"))

    with pytest.raises(ChainSubmissionError):
        ChainGateway(client).submit_and_confirm(b"raw")
    assert client.sent == [b"raw"]


def test_confirmation_timeout_raises_chain_error_on_send_sol():
    client = FakeClient(confirm_error=RuntimeError("timed out"))

    with pytest.raises(ChainSubmissionError):
        ChainGateway(client).send_sol(Keypair(), str(Keypair().pubkey()), 0.001)
