"""
Test Input Sources - mirrored percentage inputs and the ternary selector

Run with: pytest tests/test_sources.py
"""

import pytest
from unittest.mock import Mock

from bayes_backend.core.fields import RadioGroup, TextField
from bayes_backend.core.percentage import InvalidPercentageError
from bayes_backend.core.sources import (
    PercentageInput,
    PercentageVariable,
    PropagationGuard,
    ReentrantUpdateError,
    TernaryVariable,
)
from bayes_backend.utils.ternary_choice import TernaryChoice


@pytest.fixture
def fields():
    return [TextField("90"), TextField("90")]


@pytest.fixture
def variable(fields):
    return PercentageVariable('sensitivity', fields)


@pytest.fixture
def selector():
    group = RadioGroup(['unknown', 'positive', 'negative'], 'unknown')
    return TernaryVariable('test_result', group)


class TestPercentageInput:
    """Single representation"""

    def test_reads_field_text(self):
        percentage_input = PercentageInput(TextField("12.5"))
        assert percentage_input.value == 12.5

    def test_invalid_text_reads_absent(self):
        assert PercentageInput(TextField("")).value is None
        assert PercentageInput(TextField("150")).value is None

    def test_write_sets_text(self):
        field = TextField("")
        PercentageInput(field).value = 30
        assert field.text == "30"

    def test_notifies_only_lexically_valid_edits(self):
        field = TextField("")
        callback = Mock()
        PercentageInput(field).on_change(callback)

        for text in ["", "-", "1e", "100", "4", "45", "45.", "45.5"]:
            field.enter(text)

        # clearing is an accepted edit: no value
        assert [c.args[0] for c in callback.call_args_list] == [None, 4.0, 45.0, 45.5]

    def test_reads_last_accepted_value(self):
        """Text the edit path ignores is never read back"""
        field = TextField("90")
        percentage_input = PercentageInput(field)

        for text in ["100", "1e1", " 5", "5."]:
            field.enter(text)
            assert percentage_input.value == 90.0, f"{text!r} must not be read"

        field.enter("")
        assert percentage_input.value is None

        field.enter("12")
        assert percentage_input.value == 12.0

    def test_programmatic_hundred_reads_back(self):
        field = TextField("")
        percentage_input = PercentageInput(field)

        percentage_input.value = 100

        assert field.text == "100"
        assert percentage_input.value == 100


class TestPercentageVariable:
    """Logical percentage with mirrored representations"""

    def test_requires_a_field(self):
        with pytest.raises(ValueError):
            PercentageVariable('sensitivity', [])

    def test_reads_first_valid_representation(self):
        variable = PercentageVariable('base_rate', [TextField(""), TextField("40"), TextField("60")])
        assert variable.value == 40.0

    def test_zero_is_a_valid_reading(self):
        variable = PercentageVariable('base_rate', [TextField("0"), TextField("60")])
        assert variable.value == 0.0

    def test_no_valid_representation_reads_absent(self):
        variable = PercentageVariable('base_rate', [TextField(""), TextField("abc")])
        assert variable.value is None

    def test_edit_mirrors_and_notifies_once(self, variable, fields):
        callback = Mock()
        variable.on_change(callback)

        fields[0].enter("75")

        assert fields[1].text == "75"
        assert variable.value == 75.0
        callback.assert_called_once_with(75.0)

    def test_edit_in_second_representation(self, variable, fields):
        callback = Mock()
        variable.on_change(callback)

        fields[1].enter("2.5")

        assert fields[0].text == "2.5"
        callback.assert_called_once_with(2.5)

    def test_invalid_edit_is_ignored(self, variable, fields):
        callback = Mock()
        variable.on_change(callback)

        fields[0].enter("9x")
        fields[0].enter("100")

        callback.assert_not_called()
        assert fields[1].text == "90", "Invalid edit must not be written back"
        assert variable.value == 90.0

    def test_non_lexical_number_keeps_previous_value(self, variable, fields):
        """'100', '1e1' and ' 5' parse as numbers but are not accepted edits"""
        callback = Mock()
        variable.on_change(callback)

        for text in ["100", "1e1", " 5"]:
            fields[0].enter(text)
            assert variable.value == 90.0, f"{text!r} must not be read"
            assert fields[1].text == "90"

        callback.assert_not_called()

    def test_clearing_field_mirrors_and_notifies_absent(self, variable, fields):
        callback = Mock()
        variable.on_change(callback)

        fields[0].enter("")

        assert fields[1].text == ""
        assert variable.value is None
        callback.assert_called_once_with(None)

    def test_clearing_every_field_reads_absent(self, variable, fields):
        callback = Mock()
        variable.on_change(callback)

        fields[0].enter("")
        fields[1].enter("")

        assert variable.value is None
        assert [c.args[0] for c in callback.call_args_list] == [None, None]

    def test_typing_sequence_notifies_per_valid_step(self, variable, fields):
        callback = Mock()
        variable.on_change(callback)

        for text in ["", "8", "85", "85.", "85.5"]:
            fields[0].enter(text)

        assert [c.args[0] for c in callback.call_args_list] == [None, 8.0, 85.0, 85.5]
        assert fields[1].text == "85.5"

    def test_write_pushes_to_every_representation(self, variable, fields):
        callback = Mock()
        variable.on_change(callback)

        variable.value = 42.5

        assert [f.text for f in fields] == ["42.5", "42.5"]
        callback.assert_called_once_with(42.5)

    def test_write_hundred_reads_back(self, variable):
        variable.value = 100
        assert variable.value == 100.0

    def test_write_out_of_range_rejected(self, variable, fields):
        callback = Mock()
        variable.on_change(callback)

        with pytest.raises(InvalidPercentageError):
            variable.value = 120

        callback.assert_not_called()
        assert [f.text for f in fields] == ["90", "90"]

    def test_write_none_clears(self, variable, fields):
        callback = Mock()
        variable.on_change(callback)

        variable.value = None

        assert [f.text for f in fields] == ["", ""]
        assert variable.value is None
        callback.assert_called_once_with(None)


class TestTernaryVariable:
    """Test result selector"""

    def test_reads_checked_choice(self, selector):
        assert selector.value == TernaryChoice.UNKNOWN

    def test_group_must_offer_all_choices(self):
        with pytest.raises(ValueError):
            TernaryVariable('test_result', RadioGroup(['yes', 'no'], 'yes'))

    def test_click_notifies_once_per_change(self, selector):
        callback = Mock()
        selector.on_change(callback)

        selector.group.click('positive')
        selector.group.click('positive')

        callback.assert_called_once_with(TernaryChoice.POSITIVE)

    def test_write_selects_exclusively(self, selector):
        callback = Mock()
        selector.on_change(callback)

        selector.value = 'negative'

        assert selector.group.is_checked('negative')
        assert not selector.group.is_checked('unknown')
        assert not selector.group.is_checked('positive')
        callback.assert_called_once_with(TernaryChoice.NEGATIVE)

    def test_write_unknown_choice_rejected(self, selector):
        with pytest.raises(ValueError):
            selector.value = 'maybe'
        assert selector.value == TernaryChoice.UNKNOWN


class TestPropagationGuard:
    """Writes during a propagation pass re-enter the graph and are rejected"""

    def test_write_from_subscriber_raises(self, variable):
        other = PercentageVariable('specificity', [TextField("50")])
        guard = PropagationGuard()
        variable.attach_guard(guard)
        other.attach_guard(guard)

        def write_back(_value):
            other.value = 10

        variable.on_change(write_back)

        with pytest.raises(ReentrantUpdateError):
            variable.value = 20

        assert not guard.is_propagating
        assert other.value == 50.0

    def test_typing_from_subscriber_raises(self, variable, fields):
        def type_into_sibling(_value):
            fields[1].enter("5")

        variable.on_change(type_into_sibling)

        with pytest.raises(ReentrantUpdateError):
            fields[0].enter("7")

    def test_guard_idle_after_pass(self, variable):
        variable.value = 30
        variable.value = 31
        assert not variable.guard.is_propagating
