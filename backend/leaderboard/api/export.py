from flask import Blueprint, Response
from flask_login import login_required
from leaderboard.services.transfer import backup_filename, export_csv


export = Blueprint('export', __name__)


@export.route('', methods=['GET'])
@login_required
def export_data():
    """Full CSV backup, soft-deleted games and scores included."""
    return Response(
        export_csv(),
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename="{backup_filename()}"'},
    )
