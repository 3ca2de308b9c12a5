from flask import Blueprint, Flask, current_app, jsonify, render_template, request
from werkzeug.exceptions import HTTPException

from analysis import analyze, are_equivalent, classify
from config import load_config
from evaluator import OP_NAMES, VARIABLES, evaluate
from exceptions import ExpressionError
from logging_config import get_logger, setup_logging
from logic_operations import build_table_rows, build_truth_table
from validator import ValidatedExpression, check_expression

logger = get_logger(__name__)

bp = Blueprint('logika', __name__)


def parse_values(raw):
    """Coerce the `values` object of a request into a variable -> bool map."""
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ExpressionError('values must be an object mapping variables to booleans')
    values = {}
    for k, v in raw.items():
        if isinstance(v, bool):
            values[k] = v
        elif v in (0, 1):
            values[k] = bool(v)
        else:
            raise ExpressionError(f'Value for {k!r} must be a boolean', context={'variable': k})
    return values


def required(data, key):
    """Non-blank string field `key` of the request body."""
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ExpressionError(f'{key} is required')
    return value


def json_body():
    """JSON object sent with the request, `{}` when there is none."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ExpressionError('request body must be a JSON object')
    return data


@bp.route('/', methods=['GET', 'POST'])
def index():
    tables = []
    expr_input = ''
    errors = []
    if request.method == 'POST':
        # one expression per line
        expr_input = request.form.get('expr', '').strip()
        expr_lines = [ln.strip() for ln in expr_input.split('\n') if ln.strip()]
        for main_expr in expr_lines:
            try:
                expression = ValidatedExpression.parse(main_expr)
                variables, columns, rows = build_table_rows(expression, current_app.config['MAX_VARIABLES'])
                tables.append({
                    'expression': main_expr,
                    'vars': variables,
                    'columns': columns,
                    'rows': rows,
                    'classification': classify(expression, current_app.config['MAX_VARIABLES']),
                })
            except ExpressionError as e:
                logger.warning('Rejected expression', extra={'extra_info': {'expression': main_expr, 'reason': e.message}})
                errors.append({'expression': main_expr, 'message': e.message})
    return render_template(
        'index.html',
        tables=tables,
        errors=errors,
        expr=expr_input,
        operators=OP_NAMES,
        variables=VARIABLES,
    )


@bp.route('/api/validate', methods=['POST'])
def api_validate():
    expression = json_body().get('expression', '')
    try:
        check_expression(expression)
    except ExpressionError as e:
        return jsonify({'valid': False, 'message': e.message, 'position': getattr(e, 'position', None)})
    return jsonify({'valid': True, 'message': None, 'position': None})


@bp.route('/api/evaluate', methods=['POST'])
def api_evaluate():
    data = json_body()
    expression = ValidatedExpression.parse(required(data, 'expression'))
    values = parse_values(data.get('values'))
    result = evaluate(expression, values, trace=bool(data.get('trace', False)))
    return jsonify({'success': True, **result.to_dict()})


@bp.route('/api/truth-table', methods=['POST'])
def api_truth_table():
    expression = ValidatedExpression.parse(required(json_body(), 'expression'))
    table = build_truth_table(expression, current_app.config['MAX_VARIABLES'])
    logger.info('Truth table built', extra={'extra_info': {'expression': str(expression), 'rows': len(table)}})
    return jsonify({'success': True, **table.to_dict()})


@bp.route('/api/properties', methods=['POST'])
def api_properties():
    expression = ValidatedExpression.parse(required(json_body(), 'expression'))
    return jsonify({'success': True, **analyze(expression, current_app.config['MAX_VARIABLES'])})


@bp.route('/api/equivalence', methods=['POST'])
def api_equivalence():
    data = json_body()
    left = ValidatedExpression.parse(required(data, 'left'))
    right = ValidatedExpression.parse(required(data, 'right'))
    return jsonify({'success': True, **are_equivalent(left, right).to_dict()})


def handle_expression_error(e):
    logger.warning('Bad request', extra={'extra_info': {'path': request.path, 'reason': e.message}})
    return jsonify({'success': False, 'message': e.message, 'context': e.context}), 400


def handle_unexpected_error(e):
    if isinstance(e, HTTPException):
        return e
    logger.exception('Unexpected error', extra={'extra_info': {'path': request.path}})
    return jsonify({'success': False, 'message': 'An unexpected server error occurred.'}), 500


def create_app(test_config=None):
    app = Flask(__name__)
    load_config(app, test_config)
    setup_logging(app.config['LOG_LEVEL'], app.config['LOG_FILE'])

    app.json.sort_keys = app.config['SORT_JSON_KEYS']
    app.register_blueprint(bp)
    app.register_error_handler(ExpressionError, handle_expression_error)
    if not app.config['TESTING']:
        app.register_error_handler(Exception, handle_unexpected_error)

    logger.info('Application created', extra={'extra_info': {'max_variables': app.config['MAX_VARIABLES']}})
    return app


if __name__ == '__main__':
    app = create_app()
    app.run(debug=app.config['DEBUG'])
