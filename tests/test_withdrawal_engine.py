"""
Unit tests for the withdrawal engine (ATMachine).
"""

from unittest.mock import MagicMock, call

import pytest

from atm_machine.core.exceptions import (
    ATMOperationError,
    AccountError,
    AuthorizationError,
    ConfigurationError,
    InsufficientBanknotesError,
    MachineNotReadyError,
)
from atm_machine.core.interfaces import MoneyDeposit
from atm_machine.core.value_objects import (
    Banknote,
    BanknotesPack,
    Currency,
    ErrorCode,
    Money,
    Withdrawal,
)
from atm_machine.domain.breakdown import MinimalNotesBreakdown
from atm_machine.domain.withdrawal_engine import ATMachine, WithdrawalContext, WithdrawalPhase
from atm_machine.infrastructure.memory_deposit import InMemoryMoneyDeposit


PLN = Currency.of("PLN")
EUR = Currency.of("EUR")


def every_pln_note_once():
    return Withdrawal.create(
        BanknotesPack.create(1, Banknote(value, PLN)) for value in (500, 200, 100, 50, 20, 10)
    )


@pytest.fixture
def atm(bank, deposit):
    machine = ATMachine(bank, PLN)
    machine.set_deposit(deposit)
    return machine


# =============================================================================
# Failure Outcomes
# =============================================================================


class TestWithdrawalFailures:
    """Each failure maps to exactly one error code and stops the pipeline."""

    def test_wrong_currency(self, atm, bank, pin, card):
        """Test a foreign currency fails before the bank is contacted."""
        with pytest.raises(ATMOperationError) as exc_info:
            atm.withdraw(pin, card, Money(20, EUR))

        assert exc_info.value.error_code is ErrorCode.WRONG_CURRENCY
        bank.authorize.assert_not_called()
        bank.charge.assert_not_called()

    def test_authorization_failure(self, atm, bank, deposit, pin, card):
        """Test a rejected card stops before breakdown and charge."""
        bank.authorize.side_effect = AuthorizationError("Invalid PIN")

        with pytest.raises(ATMOperationError) as exc_info:
            atm.withdraw(pin, card, Money(20, PLN))

        assert exc_info.value.error_code is ErrorCode.AUTHORIZATION_FAILURE
        assert isinstance(exc_info.value.__cause__, AuthorizationError)
        bank.charge.assert_not_called()
        deposit.available_count_of.assert_not_called()
        deposit.release.assert_not_called()

    def test_bank_error_is_not_reraised_as_original_type(self, atm, bank, pin, card):
        bank.authorize.side_effect = AuthorizationError("Card blocked")

        with pytest.raises(ATMOperationError) as exc_info:
            atm.withdraw(pin, card, Money(20, PLN))

        assert not isinstance(exc_info.value, AuthorizationError)
        assert exc_info.value.message == "Card blocked"

    def test_wrong_amount(self, atm, bank, deposit, pin, card):
        """Test an amount below the smallest note fails without a charge."""
        with pytest.raises(ATMOperationError) as exc_info:
            atm.withdraw(pin, card, Money(1, PLN))

        assert exc_info.value.error_code is ErrorCode.WRONG_AMOUNT
        bank.authorize.assert_called_once()
        bank.charge.assert_not_called()
        deposit.release.assert_not_called()

    def test_stock_shortfall_is_wrong_amount(self, atm, bank, deposit, pin, card):
        """Test an empty cassette is reported as WRONG_AMOUNT."""
        deposit.available_count_of.return_value = 0

        with pytest.raises(ATMOperationError) as exc_info:
            atm.withdraw(pin, card, Money(20, PLN))

        assert exc_info.value.error_code is ErrorCode.WRONG_AMOUNT
        bank.charge.assert_not_called()

    def test_no_funds_on_account(self, atm, bank, deposit, pin, card):
        """Test a refused charge releases no banknotes."""
        deposit.available_count_of.return_value = 10
        bank.charge.side_effect = AccountError("Balance too low")

        with pytest.raises(ATMOperationError) as exc_info:
            atm.withdraw(pin, card, Money(20, PLN))

        assert exc_info.value.error_code is ErrorCode.NO_FUNDS_ON_ACCOUNT
        bank.charge.assert_called_once()
        deposit.release.assert_not_called()

    def test_release_failure_propagates_after_charge(self, atm, bank, deposit, pin, card):
        """Test a dispenser fault surfaces unchanged once the account is charged."""
        deposit.release.side_effect = InsufficientBanknotesError("jammed")

        with pytest.raises(InsufficientBanknotesError):
            atm.withdraw(pin, card, Money(880, PLN))

        bank.charge.assert_called_once()


# =============================================================================
# Successful Withdrawals
# =============================================================================


class TestWithdrawalSuccess:
    """Tests for successful withdrawals."""

    def test_expected_withdrawal(self, atm, bank, token, pin, card):
        """Test 880 is paid with one note of every denomination."""
        withdrawal = atm.withdraw(pin, card, Money(880, PLN))

        assert withdrawal == every_pln_note_once()
        bank.charge.assert_called_once_with(token, Money(880, PLN))

    def test_packs_released_in_descending_order(self, atm, deposit, pin, card):
        atm.withdraw(pin, card, Money(880, PLN))

        assert deposit.release.call_args_list == [call(pack) for pack in every_pln_note_once()]

    def test_credentials_passed_to_bank(self, atm, bank, pin, card):
        """Test the bank receives the PIN digits and card number."""
        atm.withdraw(pin, card, Money(50, PLN))

        bank.authorize.assert_called_once_with("1234", "5123456789104444")

    def test_zero_amount(self, atm, bank, deposit, token, pin, card):
        """Test a zero withdrawal charges once and never queries stock."""
        withdrawal = atm.withdraw(pin, card, Money(0, PLN))

        assert withdrawal.is_empty
        bank.charge.assert_called_once_with(token, Money(0, PLN))
        deposit.available_count_of.assert_not_called()
        deposit.release.assert_not_called()

    def test_sum_of_all_denominations_in_other_currency(self, bank, pin, card):
        """Test a EUR machine pays the sum of its notes with one of each."""
        deposit = MagicMock(spec=MoneyDeposit)
        deposit.currency.return_value = EUR
        deposit.available_count_of.return_value = 1
        machine = ATMachine(bank, EUR, deposit)

        withdrawal = machine.withdraw(pin, card, Money(885, EUR))

        assert [(p.banknote.value, p.count) for p in withdrawal] == [
            (500, 1), (200, 1), (100, 1), (50, 1), (20, 1), (10, 1), (5, 1),
        ]

    def test_same_stock_same_withdrawal(self, atm, pin, card):
        """Test repeated withdrawals against an unchanged stock are identical."""
        first = atm.withdraw(pin, card, Money(370, PLN))
        second = atm.withdraw(pin, card, Money(370, PLN))

        assert first == second

    @pytest.mark.parametrize("amount", [10, 30, 90, 480, 1250, 2880])
    def test_withdrawal_sums_to_amount(self, bank, pin, card, amount):
        """Test released banknotes always add up to the requested amount."""
        stock = {500: 3, 200: 4, 100: 2, 50: 5, 20: 5, 10: 10}
        deposit = InMemoryMoneyDeposit(PLN, stock)
        machine = ATMachine(bank, PLN, deposit)

        withdrawal = machine.withdraw(pin, card, Money(amount, PLN))

        assert withdrawal.total == amount
        assert sum(pack.value for pack in deposit.released) == amount
        for pack in withdrawal:
            assert deposit.available_count_of(pack.banknote) == stock[pack.banknote.value] - pack.count

    def test_configured_strategy_is_used(self, bank, pin, card):
        """Test the minimal-notes strategy pays what greedy cannot."""
        deposit = InMemoryMoneyDeposit(PLN, {50: 1, 20: 3})
        machine = ATMachine(bank, PLN, deposit, breakdown_strategy=MinimalNotesBreakdown())

        withdrawal = machine.withdraw(pin, card, Money(60, PLN))

        assert [(p.banknote.value, p.count) for p in withdrawal] == [(20, 3)]
        assert deposit.stock() == {50: 1, 20: 0}


# =============================================================================
# Machine Configuration
# =============================================================================


class TestMachineConfiguration:
    """Tests for ATMachine construction and deposit attachment."""

    def test_withdraw_without_deposit(self, bank, pin, card):
        """Test the deposit must be attached before withdrawing."""
        machine = ATMachine(bank, PLN)
        assert not machine.has_deposit

        with pytest.raises(MachineNotReadyError):
            machine.withdraw(pin, card, Money(20, PLN))
        bank.authorize.assert_not_called()

    def test_deposit_in_other_currency_rejected(self, bank):
        deposit = InMemoryMoneyDeposit(EUR)
        machine = ATMachine(bank, PLN)

        with pytest.raises(ConfigurationError):
            machine.set_deposit(deposit)
        assert not machine.has_deposit

    def test_deposit_currency_changed_after_attach(self, atm, bank, deposit, pin, card):
        """Test a re-seeded deposit in another currency blocks withdrawals."""
        deposit.currency.return_value = EUR

        with pytest.raises(MachineNotReadyError) as exc_info:
            atm.withdraw(pin, card, Money(20, EUR))

        assert exc_info.value.details == {"machine": "PLN", "deposit": "EUR"}
        bank.authorize.assert_not_called()
        bank.charge.assert_not_called()
        deposit.release.assert_not_called()

    def test_deposit_can_be_replaced(self, atm, deposit, pin, card):
        replacement = InMemoryMoneyDeposit(PLN, {100: 1})
        atm.set_deposit(replacement)

        atm.withdraw(pin, card, Money(100, PLN))

        assert replacement.stock() == {100: 0}
        deposit.release.assert_not_called()

    def test_currency_without_banknotes_rejected(self, bank):
        with pytest.raises(ConfigurationError):
            ATMachine(bank, Currency.of("JPY"))

    def test_machine_banknotes_follow_currency(self, bank):
        machine = ATMachine(bank, PLN)
        assert machine.currency == PLN
        assert [note.value for note in machine.banknotes] == [500, 200, 100, 50, 20, 10]


class TestWithdrawalContext:
    """Tests for WithdrawalContext phase tracking."""

    def test_advance_and_fail(self):
        context = WithdrawalContext(amount=Money(20, PLN))
        assert context.phase is WithdrawalPhase.START

        context.advance(WithdrawalPhase.CURRENCY_CHECKED)
        error = context.fail(ErrorCode.AUTHORIZATION_FAILURE)

        assert context.phase is WithdrawalPhase.FAILED
        assert context.error_code is ErrorCode.AUTHORIZATION_FAILURE
        assert error.details == {"amount": 20}
