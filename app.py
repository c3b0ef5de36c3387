"""
Flask Web Application for the Bayesian Test Calculator

JSON API in front of the reactive calculator graph. The page that renders
the entry fields and marker rows talks to these routes; every response
carries the settled snapshot.
"""

from flask import Flask, request, jsonify
import logging
import os
import threading

from bayes_backend.commands import EnterText, ReadSnapshot, SelectTestResult, SetPercentage
from bayes_backend.core.calculator_session import CalculatorSession
from bayes_backend.core.graph import PERCENTAGE_KEYS, assemble_graph, create_inputs
from bayes_backend.results import IllegalCommand, UpdateResult
from bayes_backend.utils.helpers import DEFAULTS_PATH, load_defaults
from bayes_backend.utils.readiness import ReadinessGate

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Initialize Flask app
app = Flask(__name__)
app.config['CALCULATOR_DEFAULTS'] = os.environ.get('CALCULATOR_DEFAULTS', str(DEFAULTS_PATH))

# Graph is assembled once, when the app is ready
startup = ReadinessGate()

# The calculator core is single-threaded: a propagation pass must run to
# completion before the next write. Flask serves requests on several threads,
# so every command against the shared session runs under this lock.
session_lock = threading.Lock()


def setup_calculator():
    """Build inputs, graph and session (called once at startup)"""
    defaults = load_defaults(app.config['CALCULATOR_DEFAULTS'])
    graph = assemble_graph(create_inputs(defaults))
    logger.info("Calculator ready")
    return {'session': CalculatorSession(graph), 'defaults': defaults}


def current_session() -> CalculatorSession:
    if not startup.has_run:
        raise RuntimeError("Calculator not initialized")
    return startup.result['session']


def run_command(command):
    """Apply one command to the shared session, serialized across requests"""
    with session_lock:
        return current_session().handle(command)


def default_percentage(text):
    """Defaults hold field text; text that is not a number is passed on for the session to reject"""
    try:
        return float(text)
    except (TypeError, ValueError):
        return text


def respond(result):
    """Turn a session result into a JSON response"""
    if isinstance(result, IllegalCommand):
        return jsonify({
            'success': False,
            'error': result.reason,
            'command': result.command_type
        }), 400

    return jsonify({
        'success': True,
        'state': result.snapshot.to_json(),
        'notifications': result.notifications
    })


@app.route('/api/state', methods=['GET'])
def get_state():
    """Current settled state"""
    try:
        return respond(run_command(ReadSnapshot()))
    except Exception as e:
        logger.error(f"Error reading state: {e}")
        return jsonify({'success': False, 'error': str(e)}), 500


@app.route('/api/percentage', methods=['POST'])
def set_percentage():
    """Write a percentage input: {"key": "sensitivity", "value": 85}"""
    try:
        data = request.get_json(silent=True) or {}
        command = SetPercentage(key=data.get('key'), value=data.get('value'))
        return respond(run_command(command))
    except Exception as e:
        logger.error(f"Error setting percentage: {e}")
        return jsonify({'success': False, 'error': str(e)}), 500


@app.route('/api/enter', methods=['POST'])
def enter_text():
    """Simulate typing into one field: {"key": ..., "representation": 0, "text": "8"}"""
    try:
        data = request.get_json(silent=True) or {}
        command = EnterText(
            key=data.get('key'),
            representation=data.get('representation', 0),
            text=data.get('text', '')
        )
        return respond(run_command(command))
    except Exception as e:
        logger.error(f"Error entering text: {e}")
        return jsonify({'success': False, 'error': str(e)}), 500


@app.route('/api/test-result', methods=['POST'])
def select_test_result():
    """Select the test result: {"value": "positive"}"""
    try:
        data = request.get_json(silent=True) or {}
        return respond(run_command(SelectTestResult(choice=data.get('value'))))
    except Exception as e:
        logger.error(f"Error selecting test result: {e}")
        return jsonify({'success': False, 'error': str(e)}), 500


@app.route('/api/reset', methods=['POST'])
def reset_inputs():
    """
    Write the default values back into every input (graph is kept).

    Stops at the first rejected default and reports it; notifications are
    summed over all commands applied.
    """
    try:
        defaults = startup.result['defaults']
        commands = [SetPercentage(key=key, value=default_percentage(defaults[key])) for key in PERCENTAGE_KEYS]
        commands.append(SelectTestResult(choice=defaults['test_result']))

        notifications = 0
        with session_lock:
            session = current_session()
            for command in commands:
                result = session.handle(command)
                if isinstance(result, IllegalCommand):
                    return respond(result)
                notifications += result.notifications

        return respond(UpdateResult(snapshot=result.snapshot, notifications=notifications))
    except Exception as e:
        logger.error(f"Error resetting inputs: {e}")
        return jsonify({'success': False, 'error': str(e)}), 500


startup.when_ready(setup_calculator)
startup.signal_ready()


if __name__ == '__main__':
    print("\n" + "="*60)
    print("BAYESIAN TEST CALCULATOR - WEB API")
    print("="*60)
    print("\nOpen your browser and go to: http://localhost:5000/api/state")
    print("\nPress Ctrl+C to stop the server")
    print("="*60 + "\n")

    app.run(debug=True, host='0.0.0.0', port=5000)
