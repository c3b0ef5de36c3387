"""
Console Test Harness for the Bayesian Test Calculator

Simple console loop to drive the reactive graph without the web API.

Commands:
    sensitivity 85          set a percentage input
    type base_rate 1 2.5    type text into representation 1 of base_rate
    result positive         select test result (unknown/positive/negative)
    show                    print current state
    quit                    exit
"""

import logging
import sys

from bayes_backend.commands import EnterText, ReadSnapshot, SelectTestResult, SetPercentage
from bayes_backend.core.calculator_session import CalculatorSession
from bayes_backend.core.graph import PERCENTAGE_KEYS, assemble_graph, create_inputs
from bayes_backend.results import IllegalCommand
from bayes_backend.utils.helpers import load_defaults
from bayes_backend.utils.readiness import ReadinessGate

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

EXIT_COMMANDS = {"quit", "exit", "stop"}


def print_separator(char="=", length=60):
    """Print a separator line"""
    print(char * length)


def print_snapshot(snapshot):
    """Print inputs, readouts and marker rows"""
    inputs = snapshot.inputs
    print(f"\nSensitivity {inputs['sensitivity']}  Specificity {inputs['specificity']}  "
          f"Base rate {inputs['base_rate']}  Test result {inputs['test_result']}")
    print(f"  Condition probability: {snapshot.displays['condition_probability']}%")
    print(f"  PPV: {snapshot.displays['positive_predictive_value']}%   "
          f"NPV: {snapshot.displays['negative_predictive_value']}%")
    for name, count in snapshot.marker_counts.items():
        print(f"  {name:<15} {'*' * count} ({count})")
    print()


def parse_command(line):
    """
    Translate a console line into a command.

    Returns:
        Command, or None if the line is not understood
    """
    parts = line.split()
    if not parts:
        return None

    head = parts[0].lower()

    if head == "show" and len(parts) == 1:
        return ReadSnapshot()

    if head == "result" and len(parts) == 2:
        return SelectTestResult(choice=parts[1].lower())

    if head == "type" and len(parts) in (3, 4):
        text = parts[3] if len(parts) == 4 else ""
        try:
            index = int(parts[2])
        except ValueError:
            return None
        return EnterText(key=parts[1], representation=index, text=text)

    if head in PERCENTAGE_KEYS and len(parts) == 2:
        if parts[1].lower() == "clear":
            return SetPercentage(key=head, value=None)
        try:
            return SetPercentage(key=head, value=float(parts[1]))
        except ValueError:
            return None

    return None


def main():
    """Run console harness"""
    print_separator()
    print("BAYESIAN TEST CALCULATOR - CONSOLE")
    print_separator()

    startup = ReadinessGate()

    def setup():
        return CalculatorSession(assemble_graph(create_inputs(load_defaults())))

    try:
        startup.when_ready(setup)
        startup.signal_ready()
    except Exception as e:
        print(f"\nFailed to initialize: {e}")
        import traceback
        traceback.print_exc()
        return 1

    session = startup.result
    print_snapshot(session.handle(ReadSnapshot()).snapshot)
    print("Type 'quit', 'exit', or 'stop' to end\n")

    while True:
        try:
            line = input("> ").strip()

            if line.lower() in EXIT_COMMANDS:
                break

            command = parse_command(line)
            if command is None:
                print("Not understood. Try: sensitivity 85 | type base_rate 0 2 | result positive | show\n")
                continue

            result = session.handle(command)
            if isinstance(result, IllegalCommand):
                print(f"Rejected: {result.reason}\n")
                continue

            print_snapshot(result.snapshot)
            if result.notifications > 1:
                logger.info(f"condition_probability notified {result.notifications} times before settling")

        except (KeyboardInterrupt, EOFError):
            print("\n\nInterrupted")
            break

    print_separator()
    print("Console session complete")
    print_separator()
    return 0


if __name__ == '__main__':
    sys.exit(main())
