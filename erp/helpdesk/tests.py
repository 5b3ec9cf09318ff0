"""
Test suite for the helpdesk module
Tests: email threading, inbound mail, replies, assignment, closing and feedback, SLA, reassignment
"""
import base64
from datetime import timedelta
from decimal import Decimal
from django.core import mail
from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework import status
from erp.core.models import Notification
from erp.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from erp.helpdesk.inbound import parse_inbound, parse_mime
from erp.helpdesk.models import Ticket, TicketMessage, TicketCategory, SLAPolicy, TicketFeedback
from erp.helpdesk.services import (
    make_feedback_token, get_next_available_agent, auto_reassign_tickets, check_sla,
)
from erp.helpdesk.threading import (
    normalize_message_id, parse_references, clean_reply_body, reply_subject, extract_email,
)

SECRET = 'inbound-secret'
INBOUND_URL = f'/api/v1/helpdesk/email-inbound/?secret={SECRET}'


class ThreadingHelperTests(TestCase):
    """Test message id and body helpers"""

    def test_normalize_message_id(self):
        self.assertEqual(normalize_message_id(' <abc@mail.test> '), 'abc@mail.test')
        self.assertEqual(normalize_message_id(None), '')

    def test_parse_references(self):
        self.assertEqual(parse_references('<a@x> <b@x>\n <c@x>'), ['a@x', 'b@x', 'c@x'])
        self.assertEqual(parse_references(['<a@x> <b@x>', '<c@x>']), ['a@x', 'b@x', 'c@x'])

    def test_clean_reply_body_drops_quoted_text(self):
        html = '<style>p {color: red}</style><p>Thanks, fixed now<br>Jane</p>\n<p>From: Support</p><p>old text</p>'
        self.assertEqual(clean_reply_body(html), 'Thanks, fixed now\nJane')

    def test_reply_subject(self):
        self.assertEqual(reply_subject('Printer'), 'Re: Printer')
        self.assertEqual(reply_subject('RE: Printer'), 'RE: Printer')

    def test_extract_email(self):
        self.assertEqual(extract_email('Jane Doe <Jane@Globex.TEST>'), 'jane@globex.test')
        self.assertEqual(extract_email([{'Email': 'a@b.test'}]), 'a@b.test')
        self.assertEqual(extract_email('no address'), '')


class InboundParsingTests(TestCase):
    """Test webhook body normalization"""

    def test_postmark_payload(self):
        parsed = parse_inbound({
            'FromFull': {'Email': 'jane@globex.test', 'Name': 'Jane'},
            'OriginalRecipient': 'support@acme.test',
            'Subject': 'Broken',
            'TextBody': 'It broke',
            'Headers': [{'Name': 'In-Reply-To', 'Value': '<prev@mail>'}],
            'Attachments': [{'Name': 'log.txt', 'Content': base64.b64encode(b'log').decode(),
                             'ContentType': 'text/plain'}],
        })
        self.assertEqual(parsed['from_email'], 'jane@globex.test')
        self.assertEqual(parsed['to_email'], 'support@acme.test')
        self.assertEqual(parsed['in_reply_to'], '<prev@mail>')
        self.assertEqual(parsed['attachments'], [('log.txt', b'log', 'text/plain')])

    def test_raw_mime(self):
        raw = (
            'From: Jane <jane@globex.test>\r\n'
            'To: support@acme.test\r\n'
            'Subject: Hello\r\n'
            'Message-ID: <m1@globex.test>\r\n'
            'References: <a@x> <b@x>\r\n'
            'Content-Type: text/plain; charset=utf-8\r\n'
            '\r\n'
            'Body text\r\n'
        )
        parsed = parse_mime(raw)
        self.assertEqual(parsed['from_email'], 'jane@globex.test')
        self.assertEqual(parsed['subject'], 'Hello')
        self.assertEqual(parsed['message_id'], '<m1@globex.test>')
        self.assertIn('Body text', parsed['text'])


class HelpdeskTestCase(TestCase):

    def setUp(self):
        self.company = TestDataFactory.create_company()
        self.mailbox = TestDataFactory.create_mailbox(self.company)
        self.admin = TestDataFactory.create_user(username='helpadmin', role='admin', company=self.company)
        self.agent1 = TestDataFactory.create_user(username='agent1', role='agent', company=self.company)
        self.agent2 = TestDataFactory.create_user(username='agent2', role='agent', company=self.company)
        self.customer = TestDataFactory.create_customer(
            company=self.company, name='Globex', email='jane@globex.test', agents=[self.agent1, self.agent2]
        )
        self.client = AuthenticatedAPIClient()

    def inbound(self, **fields):
        payload = {'from': 'Jane <jane@globex.test>', 'to': 'support@acme.test', 'subject': 'Printer down',
                   'text': 'It does not print'}
        payload.update(fields)
        return self.client.post(INBOUND_URL, payload, format='json')


@override_settings(INBOUND_EMAIL_SECRET=SECRET)
class InboundEmailTests(HelpdeskTestCase):
    """Test the inbound email webhook"""

    def test_wrong_secret(self):
        response = self.client.post('/api/v1/helpdesk/email-inbound/?secret=nope', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    @override_settings(INBOUND_EMAIL_SECRET='')
    def test_unconfigured_secret_rejects_everything(self):
        response = self.client.post('/api/v1/helpdesk/email-inbound/?secret=', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_new_thread_opens_ticket_and_rotates_agents(self):
        first = self.inbound(messageId='<t1@globex.test>')
        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        second = self.inbound(messageId='<t2@globex.test>', subject='Scanner down')
        self.assertEqual(second.status_code, status.HTTP_201_CREATED)

        ticket1 = Ticket.objects.get(pk=first.data['ticketId'])
        ticket2 = Ticket.objects.get(pk=second.data['ticketId'])
        self.assertEqual(ticket1.agent, self.agent1)
        self.assertEqual(ticket2.agent, self.agent2)
        self.assertEqual(ticket1.email_thread_id, 't1@globex.test')
        self.assertEqual(ticket1.email_alias, 'support@acme.test')
        self.assertEqual(ticket1.source, 'email')
        self.assertIsNotNone(ticket1.sla_due)
        self.assertTrue(Notification.objects.filter(user=self.agent1, notification_type='ticket-assigned').exists())

    def test_reply_threads_onto_ticket(self):
        ticket_id = self.inbound(messageId='<t1@globex.test>').data['ticketId']
        response = self.inbound(messageId='<t1-r1@globex.test>', inReplyTo='<t1@globex.test>',
                                subject='Re: Printer down', text='Still broken\n\nFrom: Support\nold')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['ticketId'], ticket_id)
        self.assertEqual(Ticket.objects.count(), 1)
        self.assertEqual(TicketMessage.objects.filter(ticket_id=ticket_id).latest('id').message, 'Still broken')

    def test_reply_matched_by_references(self):
        ticket_id = self.inbound(messageId='<t1@globex.test>').data['ticketId']
        response = self.inbound(messageId='<x@globex.test>', references='<other@x> <t1@globex.test>')
        self.assertEqual(response.data['ticketId'], ticket_id)

    def test_duplicate_message_is_ignored(self):
        self.inbound(messageId='<t1@globex.test>')
        self.inbound(messageId='<t1-r1@globex.test>', inReplyTo='<t1@globex.test>')
        response = self.inbound(messageId='<t1-r1@globex.test>', inReplyTo='<t1@globex.test>')
        self.assertTrue(response.data['duplicate'])
        self.assertEqual(TicketMessage.objects.count(), 2)

    def test_reply_reopens_closed_ticket(self):
        ticket_id = self.inbound(messageId='<t1@globex.test>').data['ticketId']
        Ticket.objects.filter(pk=ticket_id).update(status='closed', closed_at=timezone.now(), auto_closed=True)
        response = self.inbound(messageId='<t1-r1@globex.test>', inReplyTo='<t1@globex.test>')
        self.assertTrue(response.data['reopened'])
        ticket = Ticket.objects.get(pk=ticket_id)
        self.assertEqual(ticket.status, 'open')
        self.assertIsNone(ticket.closed_at)
        self.assertFalse(ticket.auto_closed)

    def test_unknown_mailbox(self):
        response = self.inbound(to='sales@acme.test', messageId='<t9@globex.test>')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['message'], 'Invalid mailbox')

    def test_unknown_customer(self):
        response = self.inbound(**{'from': 'stranger@else.test', 'messageId': '<t9@else.test>'})
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['message'], 'Unknown customer')

    def test_missing_addresses(self):
        response = self.client.post(INBOUND_URL, {'subject': 'x'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_raw_mime_body(self):
        raw = (
            'From: jane@globex.test\r\n'
            'To: support@acme.test\r\n'
            'Subject: Raw\r\n'
            'Message-ID: <raw1@globex.test>\r\n'
            '\r\n'
            'Sent as raw mime\r\n'
        ).encode()
        response = self.client.post(INBOUND_URL, data=raw, content_type='message/rfc822')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Ticket.objects.get().subject, 'Raw')


class TicketReplyTests(HelpdeskTestCase):
    """Test replies from agents and customers"""

    def setUp(self):
        super().setUp()
        self.ticket = TestDataFactory.create_ticket(self.company, customer=self.customer, agent=self.agent1,
                                                    thread_id='t1@globex.test')
        self.ticket.email_alias = 'support@acme.test'
        self.ticket.save()

    def test_agent_reply_is_mailed_with_thread_headers(self):
        self.client.authenticate_user(self.agent1)
        response = self.client.post(f'/api/v1/helpdesk/tickets/{self.ticket.id}/message/',
                                    {'message': 'Please restart it'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['mail_sent'])

        self.assertEqual(len(mail.outbox), 1)
        sent = mail.outbox[0]
        self.assertEqual(sent.to, ['jane@globex.test'])
        self.assertEqual(sent.subject, 'Re: Printer not working')
        self.assertEqual(sent.extra_headers['In-Reply-To'], '<t1@globex.test>')
        self.assertIn('<t1@globex.test>', sent.extra_headers['References'])
        self.assertEqual(sent.extra_headers['Message-ID'], f"<{response.data['message']['message_id']}>")

        self.ticket.refresh_from_db()
        self.assertEqual(self.ticket.status, 'in-progress')
        self.assertIsNotNone(self.ticket.last_agent_reply_at)

    def test_customer_reply_through_portal(self):
        customer_user = TestDataFactory.create_user(email='jane@globex.test', role='customer', company=self.company)
        self.client.authenticate_user(customer_user)
        response = self.client.post(f'/api/v1/helpdesk/tickets/{self.ticket.id}/message/',
                                    {'message': 'Any news?'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['message']['sender_type'], 'customer')
        self.assertEqual(len(mail.outbox), 0)

    def test_empty_reply(self):
        self.client.authenticate_user(self.agent1)
        response = self.client.post(f'/api/v1/helpdesk/tickets/{self.ticket.id}/message/',
                                    {'message': '<p> </p>'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_other_agent_cannot_see_ticket(self):
        self.client.authenticate_user(self.agent2)
        response = self.client.get(f'/api/v1/helpdesk/tickets/{self.ticket.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class TicketAssignmentTests(HelpdeskTestCase):
    """Test manual assignment and status changes"""

    def setUp(self):
        super().setUp()
        self.ticket = TestDataFactory.create_ticket(self.company, customer=self.customer)
        self.client.authenticate_user(self.admin)

    def test_assign_sets_sla_and_notifies(self):
        response = self.client.post('/api/v1/helpdesk/assign/', {
            'ticketId': self.ticket.id, 'agentId': self.agent2.id, 'priority': 'high',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.ticket.refresh_from_db()
        self.assertEqual(self.ticket.agent, self.agent2)
        self.assertEqual(self.ticket.assignment_source, 'manual')
        self.assertAlmostEqual((self.ticket.sla_due - self.ticket.assigned_at).total_seconds(), 8 * 3600)
        self.assertTrue(Notification.objects.filter(user=self.agent2, reference=f"ticket:{self.ticket.id}").exists())

    def test_assign_same_agent_again(self):
        self.client.post('/api/v1/helpdesk/assign/', {'ticketId': self.ticket.id, 'agentId': self.agent1.id},
                         format='json')
        response = self.client.post('/api/v1/helpdesk/assign/', {'ticketId': self.ticket.id, 'agentId': self.agent1.id},
                                    format='json')
        self.assertEqual(response.data, {'success': True, 'msg': 'Already assigned'})

    def test_assign_to_another_agent_conflicts(self):
        self.client.post('/api/v1/helpdesk/assign/', {'ticketId': self.ticket.id, 'agentId': self.agent1.id},
                         format='json')
        response = self.client.post('/api/v1/helpdesk/assign/', {'ticketId': self.ticket.id, 'agentId': self.agent2.id},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_employee_cannot_assign(self):
        employee = TestDataFactory.create_user(role='employee', company=self.company)
        self.client.authenticate_user(employee)
        response = self.client.post('/api/v1/helpdesk/assign/', {'ticketId': self.ticket.id, 'agentId': self.agent1.id},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_invalid_status(self):
        response = self.client.post('/api/v1/helpdesk/update-status/', {'ticketId': self.ticket.id, 'status': 'done'},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_filters(self):
        TestDataFactory.create_ticket(self.company, customer=self.customer, priority='urgent', subject='Fire')
        response = self.client.get('/api/v1/helpdesk/list/?priority=urgent')
        self.assertEqual(response.data['count'], 1)
        response = self.client.get('/api/v1/helpdesk/list/?search=printer')
        self.assertEqual(response.data['count'], 1)


class FeedbackTests(HelpdeskTestCase):
    """Test closing tickets and customer feedback"""

    def setUp(self):
        super().setUp()
        self.ticket = TestDataFactory.create_ticket(self.company, customer=self.customer, agent=self.agent1)

    def test_close_sends_feedback_request(self):
        self.client.authenticate_user(self.agent1)
        response = self.client.post('/api/v1/helpdesk/close/', {'ticketId': self.ticket.id}, format='json')
        self.assertEqual(response.data['message'], 'Ticket closed and feedback email sent')
        self.ticket.refresh_from_db()
        self.assertEqual(self.ticket.status, 'closed')
        self.assertIsNotNone(self.ticket.closed_at)
        self.assertEqual(mail.outbox[0].to, ['jane@globex.test'])
        self.assertIn('/feedback?token=', mail.outbox[0].alternatives[0][0])

    def test_submit_feedback(self):
        token = make_feedback_token(self.ticket)
        response = self.client.post('/api/v1/helpdesk/feedback/submit/',
                                    {'token': token, 'rating': 2, 'comment': 'Slow'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        feedback = TicketFeedback.objects.get()
        self.assertEqual(feedback.sentiment, 'negative')
        self.ticket.refresh_from_db()
        self.assertEqual(self.ticket.feedback_rating, 2)
        self.assertTrue(Notification.objects.filter(user=self.agent1, notification_type='ticket-feedback').exists())

        response = self.client.post('/api/v1/helpdesk/feedback/submit/', {'token': token, 'rating': 5}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_invalid_token_and_rating(self):
        response = self.client.post('/api/v1/helpdesk/feedback/submit/', {'token': 'forged', 'rating': 5},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.post('/api/v1/helpdesk/feedback/submit/',
                                    {'token': make_feedback_token(self.ticket), 'rating': 6}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_request_after_submission_conflicts(self):
        TicketFeedback.objects.create(ticket=self.ticket, rating=5)
        self.client.authenticate_user(self.agent1)
        response = self.client.get(f'/api/v1/helpdesk/feedback/?ticketId={self.ticket.id}')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_csat_list_for_agent(self):
        TicketFeedback.objects.create(ticket=self.ticket, rating=4)
        other = TestDataFactory.create_ticket(self.company, customer=self.customer, agent=self.agent2)
        TicketFeedback.objects.create(ticket=other, rating=1)
        self.client.authenticate_user(self.agent1)
        response = self.client.get('/api/v1/helpdesk/csat/list/')
        self.assertEqual(response.data['count'], 1)


class SLATests(HelpdeskTestCase):
    """Test SLA policies and breach checks"""

    def setUp(self):
        super().setUp()
        self.ticket = TestDataFactory.create_ticket(self.company, customer=self.customer, agent=self.agent1,
                                                    priority='high')
        Ticket.objects.filter(pk=self.ticket.pk).update(created_at=timezone.now() - timedelta(hours=3))
        self.ticket.refresh_from_db()

    def test_no_policy(self):
        self.client.authenticate_user(self.admin)
        response = self.client.post('/api/v1/helpdesk/sla/check/', {'ticketId': self.ticket.id}, format='json')
        self.assertEqual(response.data, {'success': True, 'msg': 'No SLA configured'})

    def test_response_breach_without_agent_reply(self):
        SLAPolicy.objects.create(company=self.company, priority='high', response_hours=Decimal('2'),
                                 resolution_hours=Decimal('8'))
        result = check_sla(self.ticket)
        self.assertTrue(result['response_breach'])
        self.assertFalse(result['resolution_breach'])
        self.assertIsNone(result['first_response_hours'])

    def test_default_policy_and_timely_response(self):
        SLAPolicy.objects.create(company=self.company, priority=None, response_hours=Decimal('4'),
                                 resolution_hours=Decimal('24'))
        reply = TicketMessage.objects.create(ticket=self.ticket, sender_type='agent', sender=self.agent1, message='On it')
        TicketMessage.objects.filter(pk=reply.pk).update(created_at=self.ticket.created_at + timedelta(hours=1))
        result = check_sla(self.ticket)
        self.assertFalse(result['response_breach'])
        self.assertEqual(result['first_response_hours'], 1.0)

    def test_duplicate_policy_priority(self):
        self.client.authenticate_user(self.admin)
        payload = {'priority': 'high', 'response_hours': '2', 'resolution_hours': '8'}
        response = self.client.post('/api/v1/helpdesk/sla-policies/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        response = self.client.post('/api/v1/helpdesk/sla-policies/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)


class AgentRotationTests(HelpdeskTestCase):
    """Test agent rotation and automatic reassignment"""

    def test_rotation_skips_unavailable_agents(self):
        today = timezone.localdate()
        self.agent1.leave_from = today
        self.agent1.leave_to = today + timedelta(days=2)
        self.agent1.save()
        self.assertEqual(get_next_available_agent(self.customer), self.agent2)
        self.assertEqual(get_next_available_agent(self.customer), self.agent2)

    def test_no_agents(self):
        lonely = TestDataFactory.create_customer(company=self.company)
        self.assertIsNone(get_next_available_agent(lonely))

    def test_auto_reassign_moves_tickets_off_leave(self):
        ticket = TestDataFactory.create_ticket(self.company, customer=self.customer, agent=self.agent1)
        closed = TestDataFactory.create_ticket(self.company, customer=self.customer, agent=self.agent1, status='closed')
        today = timezone.localdate()
        self.agent1.leave_from = today
        self.agent1.leave_to = today
        self.agent1.save()

        result = auto_reassign_tickets(today)
        self.assertEqual(result['evaluated'], 1)
        self.assertEqual(result['reassigned'], 1)
        ticket.refresh_from_db()
        closed.refresh_from_db()
        self.assertEqual(ticket.agent, self.agent2)
        self.assertEqual(ticket.assignment_source, 'auto-reassign')
        self.assertEqual(closed.agent, self.agent1)

    def test_auto_reassign_endpoint_requires_admin(self):
        self.client.authenticate_user(self.agent1)
        response = self.client.post('/api/v1/helpdesk/auto-reassign/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.client.authenticate_user(self.admin)
        response = self.client.post('/api/v1/helpdesk/auto-reassign/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])

    def test_auto_reassign_rejects_impossible_date(self):
        self.client.authenticate_user(self.admin)
        for value in ('2025-13-01', 'tomorrow'):
            response = self.client.post(f'/api/v1/helpdesk/auto-reassign/?date={value}')
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
            self.assertFalse(response.data['success'])
        response = self.client.post('/api/v1/helpdesk/auto-reassign/?date=2025-08-15')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_agent_list_reports_current_leave_only(self):
        today = timezone.localdate()
        self.agent1.leave_from = today - timedelta(days=30)
        self.agent1.leave_to = today - timedelta(days=20)
        self.agent1.save()
        self.agent2.leave_from = today
        self.agent2.leave_to = today + timedelta(days=1)
        self.agent2.save()

        self.client.authenticate_user(self.admin)
        response = self.client.get('/api/v1/helpdesk/agents/')
        on_leave = {row['id']: row['on_leave'] for row in response.data}
        self.assertFalse(on_leave[self.agent1.id])
        self.assertTrue(on_leave[self.agent2.id])


class WebTicketTests(HelpdeskTestCase):
    """Test tickets opened from the portal"""

    def setUp(self):
        super().setUp()
        TicketCategory.objects.create(company=self.company, name='Hardware')
        self.customer_user = TestDataFactory.create_user(role='customer', company=self.company)
        self.customer.user = self.customer_user
        self.customer.save()
        self.client.authenticate_user(self.customer_user)

    def test_create_web_ticket(self):
        response = self.client.post('/api/v1/helpdesk/create/', {
            'category': 'Hardware', 'subject': 'Laptop', 'message': 'Screen flickers', 'priority': 'urgent',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        ticket = Ticket.objects.get()
        self.assertEqual(ticket.source, 'web')
        self.assertEqual(ticket.agent, self.agent1)
        self.assertTrue(ticket.email_thread_id.startswith('web-'))
        self.assertEqual(ticket.messages.get().message_id, ticket.email_thread_id)

    def test_invalid_category(self):
        response = self.client.post('/api/v1/helpdesk/create/', {
            'category': 'Plumbing', 'subject': 'Leak', 'message': 'Water',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Invalid category')

    def test_customer_sees_own_tickets_only(self):
        TestDataFactory.create_ticket(self.company, customer=self.customer)
        other_customer = TestDataFactory.create_customer(company=self.company)
        TestDataFactory.create_ticket(self.company, customer=other_customer)
        response = self.client.get('/api/v1/helpdesk/list/')
        self.assertEqual(response.data['count'], 1)
