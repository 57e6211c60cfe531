# tests/test_reports.py
import os
from datetime import datetime, timedelta
import pytest
from conftest import bearer, seed, signup
from lesionlog.services.report_service import ReportService
from lesionlog.utils.exceptions import NotFoundError, ValidationError

DAY = datetime(2024, 1, 5, 8, 0, 0)

def test_collect_report_data(app, client, admin_token):
    signup(client, 'alice', 'alice@example.com')
    seed(app, [
        (95, 'malignant', 2, DAY),
        (85, 'malignant', 2, DAY + timedelta(hours=1)),
        (60, 'benign', 1, DAY + timedelta(hours=2)),
        (60, 'benign', 1, DAY + timedelta(days=3)),
    ])
    with app.app_context():
        report = ReportService().collect('2024-01-05')

    assert report['startDate'] == report['endDate'] == '2024-01-05'
    assert report['totalResults'] == 3
    assert [result.prediction for result in report['results']] == ['benign', 'malignant', 'malignant']
    assert report['breakdown'] == [
        {'prediction': 'malignant', 'count': 2, 'percentage': 66.7},
        {'prediction': 'benign', 'count': 1, 'percentage': 33.3},
    ]
    assert report['userStats'] == {
        'totalUsers': 2, 'adminCount': 1, 'userCount': 1, 'userPercentage': 50, 'adminPercentage': 50
    }

def test_report_requires_start_date(app):
    with app.app_context():
        with pytest.raises(ValidationError):
            ReportService().render_report(None)

def test_report_with_no_matching_rows(app, admin_token):
    with app.app_context():
        with pytest.raises(NotFoundError):
            ReportService().render_report('2024-01-05')

def test_build_pdf_spans_pages(app, admin_token):
    rows = [(50 + i % 50, f'label-{i % 3}', 1, DAY + timedelta(minutes=i)) for i in range(150)]
    seed(app, rows)
    with app.app_context():
        service = ReportService()
        content, filename = service.render_report('2024-01-05', '2024-01-05')
    assert filename == 'results-report-2024-01-05-to-2024-01-05.pdf'
    assert content.startswith(b'%PDF')
    # 100 table rows plus the summary blocks do not fit on one A4 page
    assert content.count(b"/Type /Page") - content.count(b"/Type /Pages") >= 2

def test_download_report_streams_pdf(app, client, admin_token):
    seed(app, [(70, 'benign', 1, DAY)])
    response = client.get('/api/results/download-report?startDate=2024-01-05&endDate=2024-01-06',
                          headers=bearer(admin_token))
    assert response.status_code == 200
    assert response.mimetype == 'application/pdf'
    disposition = response.headers['Content-Disposition']
    assert disposition.startswith('attachment')
    assert 'results-report-2024-01-05-to-2024-01-06.pdf' in disposition
    assert response.data.startswith(b'%PDF')

def test_download_report_errors(client, admin_token):
    response = client.get('/api/results/download-report', headers=bearer(admin_token))
    assert response.status_code == 400
    response = client.get('/api/results/download-report?startDate=2024-01-05', headers=bearer(admin_token))
    assert response.status_code == 404

def test_email_report_attaches_pdf_and_cleans_up(app, client, admin_token, mailer):
    seed(app, [(70, 'benign', 1, DAY)])
    response = client.post('/api/results/email-report', json={'startDate': '2024-01-05'},
                           headers=bearer(admin_token))
    assert response.status_code == 200
    assert response.json['data']['recipient'] == 'root@example.com'

    message = mailer.sent[-1]
    assert message['to'] == 'root@example.com'
    assert message['attachment_name'] == 'results-report-2024-01-05-to-2024-01-05.pdf'
    assert message['attachment'].startswith(b'%PDF')
    assert not os.path.exists(message['attachment_path'])

def test_email_report_send_failure(app, client, admin_token, mailer, monkeypatch):
    seed(app, [(70, 'benign', 1, DAY)])
    created = []
    original_send = mailer.send

    def failing_send(*args, **kwargs):
        created.append(kwargs['attachment_path'])
        assert os.path.exists(kwargs['attachment_path'])
        mailer.fail = True
        return original_send(*args, **kwargs)

    monkeypatch.setattr(mailer, 'send', failing_send)
    response = client.post('/api/results/email-report', json={'startDate': '2024-01-05'},
                           headers=bearer(admin_token))
    assert response.status_code == 500
    assert response.json['success'] is False
    assert created and not os.path.exists(created[0])

def test_email_report_validation(client, admin_token, mailer):
    response = client.post('/api/results/email-report', json={}, headers=bearer(admin_token))
    assert response.status_code == 400
    response = client.post('/api/results/email-report', json={'startDate': '2024-01-05'},
                           headers=bearer(admin_token))
    assert response.status_code == 404
    assert all(message["attachment"] is None for message in mailer.sent)
