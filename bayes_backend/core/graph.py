"""
Graph assembly - wires the four inputs through the fixed diamond topology

Topology (construction order):
    base_rate, sensitivity  -> true_positive, false_negative
    base_rate, specificity  -> false_positive, true_negative
    true_positive, false_positive -> positive_predictive_value
    true_negative, false_negative -> negative_predictive_value
    test_result, base_rate, ppv, npv -> condition_probability

base_rate reaches condition_probability along five paths (four through
the predictive values, one direct), which is where transient values are
observed during a pass. See derivation.py.

Sinks:
- NumericDisplay on condition_probability, ppv, npv
- MarkerStrip on true_positive, false_negative, false_positive, true_negative

assemble_graph() runs once per process (see utils/readiness.py); the
graph is never modified afterwards.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional

from bayes_backend.contracts import CalculatorSnapshot
from bayes_backend.core import formulas
from bayes_backend.core.derivation import DerivationNode
from bayes_backend.core.fields import RadioGroup, TextField
from bayes_backend.core.sinks import MarkerStrip, NumericDisplay
from bayes_backend.core.sources import PercentageVariable, PropagationGuard, TernaryVariable
from bayes_backend.utils.ternary_choice import TernaryChoice

logger = logging.getLogger(__name__)

# Node names in construction order
NODE_NAMES = (
    'true_positive',
    'false_negative',
    'false_positive',
    'true_negative',
    'positive_predictive_value',
    'negative_predictive_value',
    'condition_probability',
)

DISPLAYED_NODES = ('condition_probability', 'positive_predictive_value', 'negative_predictive_value')
COUNTED_NODES = ('true_positive', 'false_negative', 'false_positive', 'true_negative')

PERCENTAGE_KEYS = ('sensitivity', 'specificity', 'base_rate')

# Each percentage is entered through two mirrored fields (slider + text box)
DEFAULT_REPRESENTATIONS = 2


@dataclass
class CalculatorInputs:
    """The four logical input sources"""
    sensitivity: PercentageVariable
    specificity: PercentageVariable
    base_rate: PercentageVariable
    test_result: TernaryVariable

    def __iter__(self) -> Iterator:
        return iter((self.sensitivity, self.specificity, self.base_rate, self.test_result))

    def get(self, key: str):
        if key not in PERCENTAGE_KEYS + ('test_result',):
            raise KeyError(key)
        return getattr(self, key)

    def current(self) -> Dict[str, object]:
        return {source.key: source.value for source in self}


def create_inputs(defaults: dict, representations: int = DEFAULT_REPRESENTATIONS) -> CalculatorInputs:
    """
    Build the input sources with fresh fields holding the default contents.

    Args:
        defaults: Raw defaults (see utils.helpers.load_defaults). Percentage
            defaults are field text; test_result is a choice string.
        representations: Number of mirrored fields per percentage

    Returns:
        CalculatorInputs
    """
    percentages = {
        key: PercentageVariable(key, [TextField(str(defaults[key])) for _ in range(representations)])
        for key in PERCENTAGE_KEYS
    }
    test_result = TernaryVariable(
        'test_result',
        RadioGroup([choice.value for choice in TernaryChoice], TernaryChoice(defaults['test_result']).value),
    )
    return CalculatorInputs(test_result=test_result, **percentages)


@dataclass
class CalculatorGraph:
    """Assembled graph: inputs, nodes and bound sinks"""
    inputs: CalculatorInputs
    nodes: Dict[str, DerivationNode]
    displays: Dict[str, NumericDisplay]
    markers: Dict[str, MarkerStrip]
    guard: PropagationGuard = field(default_factory=PropagationGuard)

    def values(self) -> Dict[str, float]:
        return {name: node.value for name, node in self.nodes.items()}

    def expected(self) -> Dict[str, float]:
        """Values recomputed from scratch with the current inputs"""
        return evaluate(**self.inputs.current())

    def is_settled(self) -> bool:
        """Whether every cached node value matches a from-scratch evaluation"""
        expected = self.expected()
        return all(_same(self.nodes[name].value, expected[name]) for name in NODE_NAMES)

    def snapshot(self) -> CalculatorSnapshot:
        inputs = self.inputs.current()
        inputs['test_result'] = inputs['test_result'].value
        return CalculatorSnapshot(
            inputs=inputs,
            values=self.values(),
            displays={name: display.text for name, display in self.displays.items()},
            marker_counts={name: strip.count for name, strip in self.markers.items()},
        )


def _same(a, b) -> bool:
    if isinstance(a, float) and isinstance(b, float) and math.isnan(a) and math.isnan(b):
        return True
    return a == b


def evaluate(sensitivity: Optional[float], specificity: Optional[float], base_rate: Optional[float],
             test_result) -> Dict[str, float]:
    """
    Compute every node value from scratch, without the reactive graph.

    Returns:
        dict: node name -> value, in construction order
    """
    tp = formulas.true_positive(base_rate, sensitivity)
    fn = formulas.false_negative(base_rate, sensitivity)
    fp = formulas.false_positive(base_rate, specificity)
    tn = formulas.true_negative(base_rate, specificity)
    ppv = formulas.positive_predictive_value(tp, fp)
    npv = formulas.negative_predictive_value(tn, fn)
    cp = formulas.condition_probability(test_result, base_rate, ppv, npv)
    return dict(zip(NODE_NAMES, (tp, fn, fp, tn, ppv, npv, cp)))


def assemble_graph(inputs: CalculatorInputs) -> CalculatorGraph:
    """
    Wire inputs through the fixed topology and bind the sinks.

    Construction order fixes subscription order and therefore the order in
    which transient values reach condition_probability.

    Args:
        inputs: The four logical sources

    Returns:
        CalculatorGraph
    """
    guard = PropagationGuard()
    for source in inputs:
        source.attach_guard(guard)

    tp = DerivationNode(formulas.true_positive, inputs.base_rate, inputs.sensitivity)
    fn = DerivationNode(formulas.false_negative, inputs.base_rate, inputs.sensitivity)
    fp = DerivationNode(formulas.false_positive, inputs.base_rate, inputs.specificity)
    tn = DerivationNode(formulas.true_negative, inputs.base_rate, inputs.specificity)

    ppv = DerivationNode(formulas.positive_predictive_value, tp, fp)
    npv = DerivationNode(formulas.negative_predictive_value, tn, fn)

    cp = DerivationNode(formulas.condition_probability, inputs.test_result, inputs.base_rate, ppv, npv)

    nodes = dict(zip(NODE_NAMES, (tp, fn, fp, tn, ppv, npv, cp)))

    displays = {name: NumericDisplay(name).bind(nodes[name]) for name in DISPLAYED_NODES}
    markers = {name: MarkerStrip(name).bind(nodes[name]) for name in COUNTED_NODES}

    logger.info(f"Calculator graph assembled: {len(nodes)} nodes, "
                f"{len(displays)} displays, {len(markers)} marker strips")

    return CalculatorGraph(inputs=inputs, nodes=nodes, displays=displays, markers=markers, guard=guard)
