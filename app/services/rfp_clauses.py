# app/services/rfp_clauses.py
"""
Fixed wording of the generated RFP, kept apart from the layout code in
rfp_document.py. Placeholders use str.format names:

  {org}       organisation short name (GMDC)
  {org_name}  organisation full name
  {title}     tender title
  {provider}  "Service provider" / "Contractor" / "Supplier" depending on template
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from app.models.schemas import RfpType

# Shown wherever a value is still unset
BLANK = "___________________"
DATE_PLACEHOLDER = "__/__/____"
TO_BE_DEFINED = "To be defined"
TIMELINE_PLACEHOLDER = "(T+ Months) format"
EXTENSION_TIMELINE_PLACEHOLDER = "(T1+ Months format)"
DETAILS_PLACEHOLDER = "[Details to be provided in this section]"


@dataclass(frozen=True)
class TemplateProfile:
    """What differs between the consultancy, maintenance and supply RFPs."""
    rfp_type: RfpType
    cover_lines: Tuple[str, ...]
    subject_placeholder: str
    provider: str
    engagement: str
    cover_shows_month: bool = True
    extra_definitions: Tuple[str, ...] = field(default_factory=tuple)


PROFILES = {
    RfpType.CONSULTANCY: TemplateProfile(
        rfp_type=RfpType.CONSULTANCY,
        cover_lines=("Request for Proposal", "for"),
        subject_placeholder="(To be Inserted)",
        provider="Service provider",
        engagement="assisting {org} in {title}",
    ),
    RfpType.MAINTENANCE: TemplateProfile(
        rfp_type=RfpType.MAINTENANCE,
        cover_lines=("Request for Proposal", "for"),
        subject_placeholder="(Insert RFP Name)",
        provider="Contractor",
        engagement="providing maintenance services to {org} for {title}",
        extra_definitions=(
            '"Maintenance Services" means the preventive, corrective and breakdown maintenance '
            "activities described in Section II of this RFP.",
        ),
    ),
    RfpType.SUPPLY: TemplateProfile(
        rfp_type=RfpType.SUPPLY,
        cover_lines=(
            "Request for Proposal",
            "for",
            "RFP for Supply, Installation and Commissioning with",
            "Comprehensive Annual Maintenance of",
        ),
        subject_placeholder="(Insert the Item Name for which RFP is issued)",
        provider="Supplier",
        engagement="supplying, installing and commissioning {title} for {org}",
        cover_shows_month=False,
        extra_definitions=(
            '"CAMC" means the Comprehensive Annual Maintenance Contract covering all parts, '
            "labour and services after the warranty period.",
        ),
    ),
}


# -----------------------------
# Disclaimer
# -----------------------------
DISCLAIMER = [
    'This RFP is being issued by the {org_name} ({org}) (hereunder called "Authority"/ "{org}") '
    "to the Bidder interested in {engagement} (RFP name).",
    "It is hereby clarified that this RFP is not an agreement, and the purpose of this RFP is to "
    "provide the Bidder(s) with information to assist in the formulation of their Proposals/Bids. "
    "While the RFP has been prepared in good faith with due care and caution, {org} does not accept "
    "any liability or responsibility for the accuracy, reasonableness, or completeness of the "
    "information, or for any errors, omissions or misstatements, negligent or otherwise. Each Bidder "
    "should conduct its own investigations and analysis and where necessary obtain independent advice "
    "from appropriate sources.",
    "Bidder should carefully examine and analyze the RFP and bring to the notice of {org} any error, "
    "omission or inaccuracies therein. {org} and its employees make no representation or warranty, "
    "express or implied, and shall incur no liability under any law, statute, rules or regulations as "
    "to the accuracy, reliability or completeness of the information contained in the RFP.",
]

# -----------------------------
# Definitions (numbered in order)
# -----------------------------
DEFINITIONS_INTRO = (
    "In this RFP, the following word (s), unless repugnant to the context or meaning thereof, "
    "shall have the meaning(s) assigned to them herein below:"
)
DEFINITIONS = [
    '"{org}"/"Authority" shall mean the {org_name} who shall appoint the {provider} for the captioned work.',
    '"Bidder" shall mean any firm or body corporate registered in India which submits the bid including '
    "paying the RFP Fees and Bid Security/EMD as per the terms of this RFP within the stipulated time.",
    '"Bid/Proposal" means the Bid submitted by the Bidder(s) in response to this RFP including Technical '
    "Bid and Price Bid along with all other documents forming part and in support thereof.",
    '"Bid Due Date" means last date of Bid submission as set out in Clause 1.6 of SECTION III.',
    '"{provider}" shall mean the successful Bidder who is selected by Authority/{org} as per the process '
    "outlined in this RFP Document for {title} as per the Scope of Work.",
    '"Agreement/Contract" is the agreement to be entered into between {org} and the {provider} '
    "comprising of all terms and conditions stated in this RFP.",
    '"EMD/ Bid Security" means the Bid security/ earnest money deposit to be submitted by the Bidder '
    "as per clause 2.5 of SECTION III.",
    '"Letter of Award" shall have the meaning ascribed thereto under clause 7.1 of RFP SECTION III.',
    '"Parties" means the parties to the Agreement and "Party" means either of them, as the context may '
    "admit or require.",
    '"Terms of Reference/Scope of Work" means all activities mentioned in Section II of this RFP which '
    "the {provider} is required to carry out as per Good Industry Practice.",
    '"Third Party" means any Person other than {org} and the {provider}.',
]
DEFINITIONS_OUTRO = (
    "Any other term(s), not defined herein above but defined elsewhere in this RFP shall have the "
    "meaning(s) ascribed to such term(s) therein and shall be deemed to have been included in this Section."
)

# -----------------------------
# Section I: Background
# -----------------------------
BACKGROUND = [
    "{org_name} ({org}) is a leading Public Sector Mining and Minerals Company of Gujarat with "
    "operational experience of over 60 years. {org}'s product portfolio spans across mining, value "
    "added products and power, including clean energy sources such as solar and wind besides thermal power.",
    "{org}'s mining activities are spread across Gujarat in Kutch, Devbhoomi Dwarka, Panchmahal, "
    "Vadodara, Bhavnagar, Bharuch, Surat and Chhotaudepur districts of the State, covering Lignite, "
    "Bauxite, Fluorspar, Manganese, Ball Clay, Silica Sand, Bentonitic Clay and Limestone.",
]
BACKGROUND_ENGAGEMENT = (
    "In line with {org}'s strategic vision for growth and diversification, the Corporation seeks to "
    "engage a qualified {provider} for {title}. This initiative aims to enhance {org}'s capabilities in "
    "the {department} department. The duration of this assignment is expected to be {duration} months "
    "from the date of contract signing, subject to satisfactory performance and deliverables as "
    "outlined in the scope of work."
)

# -----------------------------
# Section II: Scope of work notes
# -----------------------------
DELIVERABLES_INTRO = "The deliverables of the Scope are specified below."
T_NOTE = (
    '"T" is defined as commencement date. The Commencement date shall be seven days from the date of '
    "signing of the Agreement or mutually agreed early date when the {provider} shall commence the work."
)
EXTENSION_NOTE = (
    "(i) In case {org} decides to extend the Contract beyond {extension_year} year then it shall issue "
    "Notice to Proceed by providing time period of 7 days. In case of extension, the tentative "
    "deliverables and timeline as envisaged at this time are provided below."
)
T1_NOTE = (
    '"T1" is defined as 15 days from the date of Notice to proceed to be issued by {org} if contract '
    "period is extended as per the provision of this RFP."
)

# -----------------------------
# Section III: Instructions to bidders
# -----------------------------
BIDDING_PROCESS: List[Tuple[str, str]] = [
    ("a.", "{org} has adopted a single stage two packet bidding system separately for Technical Bid and "
           "Price Bid with evaluation as per Quality cum Cost Based System (QCBS) Method for the {title} "
           '(the "Bidding Process"). Price Bid shall be submitted online while Technical Bid shall be '
           "submitted physically in hard copy prior to the time, date and address provided in clause 1.6."),
    ("b.", "The Bidders need to offer its Bid which conforms to Terms of Reference and Terms and "
           "Conditions provided as part of this RFP Document."),
    ("c.", "In a first step, evaluation of Technical Bid will be carried out as specified in Clause 6.2 "
           "of SECTION III. The Price Bids of only technically qualified Bidders shall be opened."),
    ("d.", "In the second stage, a Price Bid Evaluation of Technically Qualified Bidders will be carried "
           'out. The Bidder obtaining Highest Composite score shall be considered as Preferred Bidder.'),
]
DUE_DILIGENCE = (
    "The Bidders are encouraged to examine and familiarize themselves fully about the nature of "
    "assignment, scope of work, all instructions, forms, terms and conditions of RFP, local condition "
    "and any other matters considered relevant by them before submitting the Bid."
)
ACKNOWLEDGEMENT_INTRO = "By submitting the bid or proposal, the bidder acknowledges that it has:"
ACKNOWLEDGEMENTS: List[Tuple[str, str]] = [
    ("1)", "made a complete and careful examination of the RFP."),
    ("2)", "received all relevant information requested from {org}."),
    ("3)", "accepted the risk of inadequacy, error or mistake in the information provided in the RFP."),
    ("4)", "acknowledged that it does not have a Conflict of Interest."),
    ("5)", "agreed to be bound by the undertakings provided by it under and in terms hereof."),
]
COST_OF_BIDDING = (
    "The Bidders shall be responsible for all of the costs associated with the preparation of their "
    "Bids and their participation in the Bid Process. {org} will not be responsible or in any way "
    "liable for such costs, regardless of the conduct or outcome of the Bidding Process."
)
RFP_FEE = (
    "Bidder will need to submit non-refundable RFP Document/Tender Fee of INR {fee}/- (i.e. RFP Fees "
    "of INR {fee} + 18% GST). The RFP Document Fees should be submitted in any one of following payment modes;"
)
RFP_FEE_MODES: List[Tuple[str, str]] = [
    ("(i)", 'In the form of a Demand Draft in favour of "{org_name}" and payable at Ahmedabad, India.'),
    ("(ii)", "Depositing the stated amount directly into {org} bank account through NEFT/RTGS/wire "
             "transfer in {org}'s Bank account specified below."),
]
RFP_FEE_RECEIPT = (
    "If payment is made through electronic mode, then the Bidder shall submit the receipt of the same "
    "in the technical bid documents as evidence for the payment of RFP Fees."
)
SCHEDULE_INTRO = "{org} shall endeavour to adhere to the bidding schedule as specified in table below."
SCHEDULE_OUTRO = (
    "{org} shall endeavour to adhere to the bidding schedule as specified above. However, there may be "
    "changes due to unavoidable circumstances. Any change shall be informed by placing the Corrigendum "
    "on the website and n-procurement portal."
)
SCHEDULE_HEADERS = ("Sr. No.", "Event Description", "Date, Time and Address")
SCHEDULE_HEADER_NOTE = "(Dates are in DD/MM/YYYY formats)"

GENERAL: List[Tuple[str, List[Tuple[str, str]]]] = [
    ("2.1. Bid Validity", [
        ("a)", "Bids shall remain valid for a period of not less than 180 days (One Hundred and Eighty "
               'days) from the Bid Due Date (the "Bid Validity Period").'),
        ("b)", "In exceptional circumstances, prior to expiry of the original Bid Validity Period, "
               "Authority may request the Bidders to extend the period of validity for a specified "
               "additional period."),
    ]),
    ("2.2. Numbers of Bids by Bidder", [
        ("", "No Bidder shall submit more than one Bid pursuant to this RFP. If a Bidder submits or "
             "participates in more than one Bid, such Bids shall be disqualified."),
    ]),
    ("2.3. Governing Law and Jurisdiction", [
        ("", "The Bidding Process shall be governed by, and construed in accordance with, the laws of "
             "India and the Courts at Ahmedabad/Gandhinagar in India shall have exclusive jurisdiction."),
    ]),
    ("2.4. Authority's Right to accept and Reject any Bids or all Bids", [
        ("a)", "Notwithstanding anything contained in this RFP, {org} reserves the right to accept or "
               "reject any Bid and to annul the Bidding Process and reject all Bids, at any time without "
               "any liability and without assigning any reasons thereof."),
        ("b)", "{org} reserves the right to reject any Bid that does not meet the qualification criteria, "
               "contains a material misrepresentation, or is conditional."),
    ]),
]
EMD_TEXT = (
    'The bidder shall furnish a separate Bid Security ("Earnest Money Deposit" (EMD)) for the captioned '
    "work as part of his Bid. An Earnest Money Deposit of an amount of INR {emd}/- shall be provided in "
    'favour of "{org_name}", in any one of the following forms.'
)
EMD_FORMS: List[Tuple[str, str]] = [
    ("i.", "Account payee Demand Draft /Banker's Cheque from any scheduled commercial Bank in India."),
    ("ii.", 'An irrevocable Bank Guarantee (the "Bank Guarantee"), payable at Ahmedabad from an Approved '
            "Bank, valid for a period of 210 days from the Bid Due Date."),
]
