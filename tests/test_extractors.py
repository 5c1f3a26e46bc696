"""Tests for busybee.extractors — regex extraction of meeting facts."""

from __future__ import annotations

import time
from datetime import date

import pytest

from busybee.extractors import (
    MAX_ACTION_ITEMS,
    _sentence_start,
    determine_priority,
    extract_action_items,
    extract_adjournment,
    extract_agenda_approval,
    extract_attendance,
    extract_call_to_order,
    extract_deadline,
    extract_decisions,
    extract_discussions,
    extract_meeting_info,
    extract_motions,
    extract_new_business,
    extract_next_meeting,
    extract_old_business,
    extract_outcomes,
    extract_participants,
    extract_public_comment,
    extract_vote,
    find_time,
    identify_assignee,
    identify_related_topic,
    split_sentences,
)
from busybee.models import VoteTally
from busybee.roster import Roster

NEW_BUSINESS = (
    "New Business.\n"
    "1. Classification study for clerk positions. Richard Farrell presented the findings. "
    "The commission approved the study.\n"
    "2. Office lease renewal for 2025. Staff will negotiate terms.\n"
    "\n"
    "Adjournment at 3:00 pm."
)


class TestHelpers:
    def test_split_sentences(self):
        assert split_sentences("One. Two!\nThree?") == ["One", "Two", "Three"]

    def test_split_sentences_keeps_decimals(self):
        assert split_sentences("Budget of 1.5 million. Done.") == ["Budget of 1.5 million", "Done"]

    def test_find_time(self):
        assert find_time("called to order at 1:05 pm today") == "1:05 pm"
        assert find_time("at 14:30") == "14:30"
        assert find_time("no time here") is None

    @pytest.mark.parametrize(
        "text, word, expected",
        [
            ("One. Two three.", "three", 4),
            ("Line one\n\nLine two", "two", 10),
            ("Budget of 1.5 million approved", "million", 0),
            ("Really?! Yes indeed", "indeed", 8),
            ("No boundary here", "here", 0),
        ],
    )
    def test_sentence_start(self, text, word, expected):
        assert _sentence_start(text, text.index(word)) == expected


class TestExtractVote:
    def test_carried_with_tally(self):
        vote = extract_vote("The motion carried with 4 ayes and 0 nays")
        assert vote.result == "Carried"
        assert vote.tally == VoteTally(yes=4, no=0, abstain=0)
        assert vote.type == "Voice Vote"

    def test_labelled_tally(self):
        vote = extract_vote("Ayes: 5, Nays: 1, Abstain: 1. Motion passes.")
        assert vote.tally == VoteTally(yes=5, no=1, abstain=1)
        assert vote.result == "Carried"

    def test_number_words(self):
        vote = extract_vote("Motion carried, five in favor and two against")
        assert vote.tally == VoteTally(yes=5, no=2, abstain=0)

    def test_failed(self):
        assert extract_vote("The motion failed").result == "Failed"

    def test_unanimous_overrides_carried(self):
        assert extract_vote("Motion carried unanimously").result == "Unanimous"

    def test_tabled_overrides_everything(self):
        assert extract_vote("The motion carried to be tabled until next month").result == "Tabled"

    def test_unknown(self):
        vote = extract_vote("Any discussion on the motion?")
        assert vote.result == "Unknown"
        assert vote.tally is None

    def test_no_tally_from_embedded_number_word(self):
        assert extract_vote("Is someone opposed? Motion carried.").tally is None

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("We will take a roll call vote", "Roll Call Vote"),
            ("By a show of hands", "Show of Hands"),
            ("Approved by unanimous consent", "Unanimous Consent"),
        ],
    )
    def test_vote_type(self, text, expected):
        assert extract_vote(text).type == expected


class TestMeetingInfo:
    def test_full(self, commission_transcript):
        info = extract_meeting_info(commission_transcript, "Regular Meeting", "commission")
        assert info.title == "Regular Meeting"
        assert info.date == "June 15, 2024"
        assert info.time == "1:05 pm"
        assert info.location == "Commission Conference Room"
        assert info.type == "Commission Meeting"

    def test_numeric_date(self):
        info = extract_meeting_info("Date: 03/04/2024\nAgenda follows.", "M")
        assert info.date == "03/04/2024"

    def test_empty_defaults(self):
        info = extract_meeting_info("", "Empty", "other")
        assert info.date == date.today().isoformat()
        assert info.time is None
        assert info.location is None
        assert info.type == "General Meeting"

    def test_case_label(self):
        assert extract_meeting_info("", "Hearing", "case").type == "Case Hearing"


class TestAttendance:
    def test_roll_call(self, commission_transcript, roster):
        records = {r.name: r for r in extract_attendance(commission_transcript, roster)}
        assert len(records) == 7
        for name in ("Raymond Muna", "Patrick Fitial", "Victoria Bellas", "Richard Farrell"):
            assert records[name].present is True
        assert records["Elvira Mesgnon"].present is False
        assert records["Michele Joab"].present is False
        assert records["Frances Torres"].present is False
        assert records["Raymond Muna"].role == "Chairperson"

    def test_absent_label(self, roster):
        text = "Roll call: Raymond Muna present. Absent: Frances Torres."
        records = {r.name: r for r in extract_attendance(text, roster)}
        assert records["Raymond Muna"].present is True
        assert records["Frances Torres"].present is False

    def test_arrival_time(self, roster):
        text = "Roll call: Raymond Muna present.\nMichele Joab arrived at 1:20 pm."
        records = {r.name: r for r in extract_attendance(text, roster)}
        assert records["Michele Joab"].present is True
        assert records["Michele Joab"].arrival_time == "1:20 pm"

    def test_departure_time(self, roster):
        text = "Raymond Muna opened the session. Patrick Fitial left at 3:10 pm."
        records = {r.name: r for r in extract_attendance(text, roster)}
        assert records["Patrick Fitial"].departure_time == "3:10 pm"

    def test_line_timestamp_as_arrival(self, roster):
        text = "[00:01:10] Raymond Muna: Good afternoon everyone."
        records = {r.name: r for r in extract_attendance(text, roster)}
        assert records["Raymond Muna"].present is True
        assert records["Raymond Muna"].arrival_time == "00:01:10"

    def test_empty_transcript(self, roster):
        assert extract_attendance("", roster) == []

    def test_empty_roster(self):
        assert extract_attendance("Raymond Muna present", Roster([])) == []

    def test_long_transcript_finishes_quickly(self, roster):
        text = "Patrick Fitial said the budget is fine and Victoria Bellas agreed with Raymond Muna. " * 3000
        began = time.perf_counter()
        records = {r.name: r for r in extract_attendance(text, roster)}
        assert time.perf_counter() - began < 5
        assert records["Patrick Fitial"].present is True


class TestCallToOrder:
    def test_chair_from_sentence(self, agenda_transcript, roster):
        call = extract_call_to_order(agenda_transcript, roster)
        assert call.found is True
        assert call.chairperson == "Raymond Muna"

    def test_time(self, commission_transcript, roster):
        call = extract_call_to_order(commission_transcript, roster)
        assert call.time == "1:05 pm"
        assert call.chairperson == "Raymond Muna"

    def test_not_found(self, roster):
        call = extract_call_to_order("We talked about lunch.", roster)
        assert call.found is False
        assert call.chairperson is None


class TestAgendaApproval:
    def test_motion(self, agenda_transcript, roster):
        agenda = extract_agenda_approval(agenda_transcript, roster)
        assert agenda.proposed is True
        assert agenda.approved is True
        assert agenda.maker == "Patrick Fitial"
        assert agenda.seconder == "Victoria Bellas"
        assert agenda.result == "Unanimous"

    def test_approved_without_motion(self, roster):
        agenda = extract_agenda_approval("The agenda was approved as presented.", roster)
        assert agenda.proposed is False
        assert agenda.approved is True
        assert agenda.result == "Approved"

    def test_absent(self, roster):
        agenda = extract_agenda_approval("Nothing relevant here.", roster)
        assert agenda.proposed is False
        assert agenda.approved is False


class TestMotions:
    def test_single_agenda_motion(self, agenda_transcript, roster):
        motions = extract_motions(agenda_transcript, roster)
        assert len(motions) == 1
        m = motions[0]
        assert m.number == 1
        assert m.text == "approve the agenda"
        assert m.maker == "Patrick Fitial"
        assert m.seconder == "Victoria Bellas"
        assert m.vote.result == "Unanimous"
        assert m.kind == "Agenda Approval"

    def test_speaker_labels(self, commission_transcript, roster):
        motions = extract_motions(commission_transcript, roster)
        assert len(motions) == 1
        m = motions[0]
        assert "approve the budget amendment" in m.text
        assert m.maker == "Patrick Fitial"
        assert m.seconder == "Richard Farrell"
        assert m.vote.result == "Carried"
        assert m.vote.tally == VoteTally(yes=4, no=0, abstain=0)
        assert m.kind == "Approval Motion"

    def test_motion_by_name(self, roster):
        text = (
            "A motion by Patrick Fitial to table the item was seconded by Victoria Bellas. "
            "The item was tabled."
        )
        m = extract_motions(text, roster)[0]
        assert m.maker == "Patrick Fitial"
        assert m.seconder == "Victoria Bellas"
        assert m.vote.result == "Tabled"
        assert m.kind == "Table Motion"

    def test_so_moved_uses_previous_sentence(self, roster):
        motions = extract_motions("Approve the minutes of May 2024. So moved.", roster)
        assert motions[0].text == "Approve the minutes of May 2024"

    def test_navigation_is_not_a_motion(self, roster):
        assert extract_motions("Let's move to the next item.", roster) == []

    def test_missing_names_default_to_member(self, roster):
        m = extract_motions("i move to approve the purchase of new laptops.", roster)[0]
        assert m.maker == "Member"
        assert m.seconder == "Member"

    def test_seconder_not_maker(self, roster):
        text = (
            "Patrick Fitial moved to adopt the revised rules. Patrick Fitial seconds his own idea. "
            "Frances Torres seconded. Motion carried."
        )
        assert extract_motions(text, roster)[0].seconder == "Frances Torres"

    def test_empty(self, roster):
        assert extract_motions("", roster) == []


class TestActionItems:
    def test_assignee_keywords(self):
        assert identify_assignee("The budget needs review") == "Budget Officer"
        assert identify_assignee("Secretary Bellas will send it") == "Secretary"
        assert identify_assignee("Someone will do it") == "Staff"

    def test_deadline(self):
        assert extract_deadline("submit the revised budget by next Friday") == "by next Friday"
        assert extract_deadline("submit it eventually") is None

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("This is urgent", "High"),
            ("Please do it soon", "Medium"),
            ("Address when possible", "Low"),
            ("Just do it", None),
        ],
    )
    def test_priority(self, text, expected):
        assert determine_priority(text) == expected

    def test_related_topic(self):
        assert identify_related_topic("personnel policy update") == "Personnel"
        assert identify_related_topic("parking lot") == "General"

    def test_from_transcript(self, commission_transcript, roster):
        items = extract_action_items(commission_transcript, roster)
        budget = next(i for i in items if i.description.startswith("The budget officer"))
        assert budget.assigned_to == "Budget Officer"
        assert budget.deadline == "by next Friday"
        assert budget.related_to == "Budget"

    def test_roster_assignee(self, roster):
        text = "Michele Joab will circulate the draft to members."
        assert extract_action_items(text, roster)[0].assigned_to == "Commissioner Michele Joab"
        assert extract_action_items(text)[0].assigned_to == "Staff"

    def test_capped(self):
        text = " ".join(f"Staff will file report number {i}." for i in range(30))
        assert len(extract_action_items(text)) == MAX_ACTION_ITEMS


class TestDecisions:
    def test_requires_governance_noun(self):
        decisions = extract_decisions("The board approved the new policy. We approved lunch orders today.")
        assert decisions == ["The board approved the new policy"]

    def test_short_sentences_skipped(self):
        assert extract_decisions("Motion passed.") == []


class TestDiscussions:
    def test_topic_with_participants(self, roster):
        text = (
            "We had a discussion on the classification study for clerks.\n"
            "Victoria Bellas: The main concern is the cost of the study for next year.\n"
            "We agreed: staff will revise the proposal."
        )
        topics = extract_discussions(text, roster)
        assert len(topics) == 1
        t = topics[0]
        assert t.topic == "the classification study for clerks"
        assert t.participants == ["Victoria Bellas"]
        assert any("main concern" in p for p in t.key_points)
        assert t.outcome == "staff will revise the proposal"

    def test_none(self, roster):
        assert extract_discussions("Short.", roster) == []


class TestBusiness:
    def test_numbered_items(self, roster):
        items = extract_new_business(NEW_BUSINESS, roster)
        assert [i.title for i in items] == [
            "Classification study for clerk positions",
            "Office lease renewal for 2025",
        ]
        assert items[0].presenter == "Richard Farrell"
        assert items[0].outcome == "The commission approved the study"
        assert items[1].action_taken == "will negotiate terms"

    def test_phrase_fallback(self, roster):
        text = (
            "Old Business. The commission discussed the audit findings from last year. "
            "Follow up is pending. New Business. Nothing new."
        )
        items = extract_old_business(text, roster)
        assert len(items) == 1
        assert items[0].title.startswith("The commission discussed the audit findings")
        assert items[0].discussion == "Follow up is pending"

    def test_no_section(self, roster):
        assert extract_old_business("Nothing here.", roster) == []
        assert extract_new_business("Nothing here.", roster) == []


class TestPublicComment:
    def test_labelled_speakers(self, roster):
        text = (
            "Public Comment.\n"
            "John Smith: I am concerned about the overtime policy for clerks.\n"
            "Mary Jones: Thanks.\n"
            "\n"
            "New Business."
        )
        speakers = extract_public_comment(text, roster)
        assert len(speakers) == 1
        assert speakers[0].name == "John Smith"
        assert speakers[0].topic == "I am concerned about the overtime policy for clerks"

    def test_comment_verb_fallback(self, roster):
        text = "Public comment: Ana Cruz spoke about parking near the building."
        speakers = extract_public_comment(text, roster)
        assert speakers[0].name == "Ana Cruz"
        assert speakers[0].topic == "parking near the building"

    def test_no_section(self, roster):
        assert extract_public_comment("No comments.", roster) == []


class TestNextMeeting:
    def test_details(self):
        nxt = extract_next_meeting(
            "The next meeting will be held on July 20, 2024 at 10:00 am in the Conference Room."
        )
        assert nxt.date == "July 20, 2024"
        assert nxt.time == "10:00 am"
        assert nxt.location == "Conference Room"

    def test_missing(self):
        assert extract_next_meeting("Thanks everyone.") is None


class TestAdjournment:
    def test_no_further_business(self, commission_transcript):
        adj = extract_adjournment(commission_transcript)
        assert adj.found is True
        assert adj.time == "2:30 pm"
        assert adj.method == "No further business"

    def test_consensus(self):
        adj = extract_adjournment("By consensus, motion to adjourn at 4:15 pm.")
        assert adj.method == "General consensus"
        assert adj.time == "4:15 pm"

    def test_not_found(self):
        assert extract_adjournment("Still going.").found is False


class TestParticipants:
    def test_known_then_other_speakers(self, roster):
        text = "Raymond Muna: Welcome everyone to the meeting.\nJohn Smith: Thank you for having me here."
        participants = extract_participants(text, roster)
        assert [p.name for p in participants] == ["Raymond Muna", "John Smith"]
        assert participants[0].role == "Chairperson"
        assert participants[0].contributions == ["Welcome everyone to the meeting."]
        assert participants[1].role == "Participant"


class TestOutcomes:
    def test_as_a_result(self):
        assert extract_outcomes("As a result, the fees will increase next quarter.") == [
            "the fees will increase next quarter"
        ]

    def test_short_skipped(self):
        assert extract_outcomes("Next steps: none.") == []
