# services/inner_dna_engine/definitions.py
# Static definitions for the Inner DNA assessment: screener questions, wing
# statements, behavioural states and instinct battles. Scenarios live in
# scenarios.py.

BANK_VERSION = "2.1.0"
BANK_RELEASED_AT = "2025-01-15"

TYPE_NAMES = {
    1: "Reformer",
    2: "Helper",
    3: "Achiever",
    4: "Individualist",
    5: "Investigator",
    6: "Sentinel",
    7: "Enthusiast",
    8: "Challenger",
    9: "Peacemaker",
}

# Screener columns feed exactly one type each
CATEGORY_TO_TYPE = {
    "A": 9,
    "B": 6,
    "C": 3,
    "D": 1,
    "E": 4,
    "F": 2,
    "G": 8,
    "H": 5,
    "I": 7,
}

# --- Part 1: Forced-choice screener (36 questions) ---
SCREENER_QUESTIONS = [
    {"id": 1, "option_a": "I've been romantic and imaginative.", "option_b": "I've been pragmatic and down to earth.", "category_a": "E", "category_b": "A"},
    {"id": 2, "option_a": "I have tended to take on confrontations.", "option_b": "I have tended to avoid confrontations.", "category_a": "G", "category_b": "B"},
    {"id": 3, "option_a": "I have typically been diplomatic, charming, and ambitious.", "option_b": "I have typically been direct, formal, and idealistic.", "category_a": "C", "category_b": "D"},
    {"id": 4, "option_a": "I have tended to be focused and intense.", "option_b": "I have tended to be spontaneous and fun-loving.", "category_a": "H", "category_b": "I"},
    {"id": 5, "option_a": "I have been a hospitable person and have enjoyed welcoming new friends into my life.", "option_b": "I have been a private person and have not mixed much with others.", "category_a": "F", "category_b": "H"},
    {"id": 6, "option_a": "Generally, it's been easy to 'get a rise' out of me.", "option_b": "Generally, it's been difficult to 'get a rise' out of me.", "category_a": "B", "category_b": "A"},
    {"id": 7, "option_a": "I've been more of a 'street-smart' survivor.", "option_b": "I've been more of a 'high-minded' idealist.", "category_a": "G", "category_b": "D"},
    {"id": 8, "option_a": "I have needed to show affection to people.", "option_b": "I have preferred to maintain a certain distance with people.", "category_a": "F", "category_b": "H"},
    {"id": 9, "option_a": "When presented with a new experience, I've usually asked myself if it would be useful to me.", "option_b": "When presented with a new experience, I've usually asked myself if it would be enjoyable.", "category_a": "C", "category_b": "I"},
    {"id": 10, "option_a": "I have tended to focus too much on myself.", "option_b": "I have tended to focus too much on others.", "category_a": "E", "category_b": "F"},
    {"id": 11, "option_a": "Others have depended on my insight and knowledge.", "option_b": "Others have depended on my strength and decisiveness.", "category_a": "H", "category_b": "G"},
    {"id": 12, "option_a": "I have come across as being too unsure of myself.", "option_b": "I have come across as being too sure of myself.", "category_a": "B", "category_b": "C"},
    {"id": 13, "option_a": "I have been more relationship-oriented than goal-oriented.", "option_b": "I have been more goal-oriented than relationship-oriented.", "category_a": "A", "category_b": "C"},
    {"id": 14, "option_a": "I have not been able to speak up for myself very well.", "option_b": "I have been outspoken; I've said what others wished they had the nerve to say.", "category_a": "E", "category_b": "G"},
    {"id": 15, "option_a": "It's been difficult for me to stop considering alternatives and do something definite.", "option_b": "It's been difficult for me to take it easy and be more flexible.", "category_a": "I", "category_b": "D"},
    {"id": 16, "option_a": "I have tended to be careful and hesitant.", "option_b": "I have tended to be bold and domineering.", "category_a": "B", "category_b": "G"},
    {"id": 17, "option_a": "My reluctance to get too involved has gotten me into trouble with people.", "option_b": "My eagerness to have people depend on me has gotten me into trouble with them.", "category_a": "H", "category_b": "F"},
    {"id": 18, "option_a": "Usually, I have been able to put my feelings aside to get the job done.", "option_b": "Usually, I have had to work through my feelings before I could act.", "category_a": "C", "category_b": "E"},
    {"id": 19, "option_a": "Generally, I've been methodical and cautious.", "option_b": "Generally, I've been adventurous and taken risks.", "category_a": "B", "category_b": "I"},
    {"id": 20, "option_a": "I have tended to be a supportive, giving person who enjoys the company of others.", "option_b": "I have tended to be a serious, reserved person who likes discussing issues.", "category_a": "F", "category_b": "D"},
    {"id": 21, "option_a": "I've often felt the need to be a 'pillar of strength.'", "option_b": "I've often felt the need to perform perfectly.", "category_a": "G", "category_b": "D"},
    {"id": 22, "option_a": "I've typically been interested in asking tough questions and maintaining my independence.", "option_b": "I've typically been interested in maintaining my stability and peace of mind.", "category_a": "H", "category_b": "A"},
    {"id": 23, "option_a": "I've been too hard-nosed and skeptical.", "option_b": "I've been too soft-hearted and sentimental.", "category_a": "H", "category_b": "F"},
    {"id": 24, "option_a": "I've often worried that I'm missing out on something better.", "option_b": "I've often worried that if I let my guard down, someone will take advantage of me.", "category_a": "I", "category_b": "B"},
    {"id": 25, "option_a": "My habit of being 'stand-offish' has annoyed people.", "option_b": "My habit of telling people what to do has annoyed people.", "category_a": "E", "category_b": "D"},
    {"id": 26, "option_a": "Usually, when troubles have gotten to me, I have been able to 'tune them out.'", "option_b": "Usually, when troubles have gotten to me, I have treated myself to something I've enjoyed.", "category_a": "A", "category_b": "I"},
    {"id": 27, "option_a": "I have depended upon my friends and they have known that they can depend on me.", "option_b": "I have not depended on people; I have done things on my own.", "category_a": "B", "category_b": "G"},
    {"id": 28, "option_a": "I have tended to be detached and preoccupied.", "option_b": "I have tended to be moody and self-absorbed.", "category_a": "H", "category_b": "E"},
    {"id": 29, "option_a": "I have liked to challenge people and 'shake them up.'", "option_b": "I have liked to comfort people and calm them down.", "category_a": "G", "category_b": "A"},
    {"id": 30, "option_a": "I have generally been an outgoing, sociable person.", "option_b": "I have generally not been an outgoing, sociable person.", "category_a": "F", "category_b": "E"},
    {"id": 31, "option_a": "I have usually liked to confront my problems head on.", "option_b": "I have usually tried to find diversions from my problems.", "category_a": "D", "category_b": "I"},
    {"id": 32, "option_a": "I have generally been shy about showing my abilities.", "option_b": "I have generally liked to let people know what I can do.", "category_a": "A", "category_b": "C"},
    {"id": 33, "option_a": "Pursuing my personal interests has been more important to me than having comfort and security.", "option_b": "Having comfort and security has been more important to me than pursuing my personal interests.", "category_a": "E", "category_b": "B"},
    {"id": 34, "option_a": "When I've had conflict with others, I've tended to withdraw.", "option_b": "When I've had conflict with others, I've rarely backed down.", "category_a": "A", "category_b": "G"},
    {"id": 35, "option_a": "I have given in too easily and let others push me around.", "option_b": "I have been too uncompromising and demanding with others.", "category_a": "A", "category_b": "D"},
    {"id": 36, "option_a": "I have been appreciated for my unsinkable spirit and great sense of humor.", "option_b": "I have been appreciated for my quiet strength and exceptional generosity.", "category_a": "I", "category_b": "F"},
]

# --- Part 3: Wing statements (5 per core type) ---
# wing_a is the lower neighbour, wing_b the higher one (9 and 1 wrap).
WING_QUESTION_SETS = [
    {
        "core_type": 1,
        "wing_a": 9,
        "wing_b": 2,
        "questions": [
            {"id": "1_q1", "option_a": "I prefer working quietly to get things right", "option_b": "I prefer helping others do things right"},
            {"id": "1_q2", "option_a": "I keep my opinions mostly to myself", "option_b": "I openly share advice to help people improve"},
            {"id": "1_q3", "option_a": "I focus on perfecting ideas and processes", "option_b": "I focus on being useful to specific people"},
            {"id": "1_q4", "option_a": "Under pressure, I become detached and quiet", "option_b": "Under pressure, I become more involved with others"},
            {"id": "1_q5", "option_a": "I'm more reserved and reflective", "option_b": "I'm more warm and interpersonal"},
        ],
    },
    {
        "core_type": 2,
        "wing_a": 1,
        "wing_b": 3,
        "questions": [
            {"id": "2_q1", "option_a": "I help because it's the right thing to do", "option_b": "I help because connection energizes me"},
            {"id": "2_q2", "option_a": "I'm more serious and principled", "option_b": "I'm more charming and adaptable"},
            {"id": "2_q3", "option_a": "I can be critical when people don't try hard enough", "option_b": "I adapt my approach to win people over"},
            {"id": "2_q4", "option_a": "I give in a structured, reliable way", "option_b": "I give in a way that builds my relationships"},
            {"id": "2_q5", "option_a": "I worry about doing things correctly", "option_b": "I worry about being seen positively"},
        ],
    },
    {
        "core_type": 3,
        "wing_a": 2,
        "wing_b": 4,
        "questions": [
            {"id": "3_q1", "option_a": "Success means helping others succeed too", "option_b": "Success means creating something unique"},
            {"id": "3_q2", "option_a": "I'm naturally warm and encouraging", "option_b": "I'm naturally introspective and artistic"},
            {"id": "3_q3", "option_a": "I focus on being liked while achieving", "option_b": "I focus on being authentic while achieving"},
            {"id": "3_q4", "option_a": "I build success through relationships", "option_b": "I build success through creative excellence"},
            {"id": "3_q5", "option_a": "Under stress, I seek validation from others", "option_b": "Under stress, I become moody and withdrawn"},
        ],
    },
    {
        "core_type": 4,
        "wing_a": 3,
        "wing_b": 5,
        "questions": [
            {"id": "4_q1", "option_a": "I want my uniqueness to be publicly recognized", "option_b": "I want deep understanding more than recognition"},
            {"id": "4_q2", "option_a": "I express myself through style and image", "option_b": "I express myself through ideas and knowledge"},
            {"id": "4_q3", "option_a": "I'm more ambitious and image-conscious", "option_b": "I'm more withdrawn and cerebral"},
            {"id": "4_q4", "option_a": "I compete to stand out from others", "option_b": "I observe from the sidelines"},
            {"id": "4_q5", "option_a": "My creativity seeks an audience", "option_b": "My creativity is mostly for myself"},
        ],
    },
    {
        "core_type": 5,
        "wing_a": 4,
        "wing_b": 6,
        "questions": [
            {"id": "5_q1", "option_a": "I'm drawn to the unusual and unconventional", "option_b": "I'm drawn to systems and how things work"},
            {"id": "5_q2", "option_a": "I process through feelings and intuition", "option_b": "I process through logic and analysis"},
            {"id": "5_q3", "option_a": "I'm more emotionally intense internally", "option_b": "I'm more anxious and security-focused"},
            {"id": "5_q4", "option_a": "I value originality and self-expression", "option_b": "I value reliability and trustworthy information"},
            {"id": "5_q5", "option_a": "I'm drawn to art, symbolism, and meaning", "option_b": "I'm drawn to science, facts, and expertise"},
        ],
    },
    {
        "core_type": 6,
        "wing_a": 5,
        "wing_b": 7,
        "questions": [
            {"id": "6_q1", "option_a": "I handle anxiety by gathering more information", "option_b": "I handle anxiety by staying positive and busy"},
            {"id": "6_q2", "option_a": "I'm more serious and analytical", "option_b": "I'm more playful and engaging"},
            {"id": "6_q3", "option_a": "I withdraw when feeling threatened", "option_b": "I seek allies and support when threatened"},
            {"id": "6_q4", "option_a": "I'm cautious and need time to trust", "option_b": "I'm friendly and build rapport quickly"},
            {"id": "6_q5", "option_a": "Security comes from knowledge and expertise", "option_b": "Security comes from options and connections"},
        ],
    },
    {
        "core_type": 7,
        "wing_a": 6,
        "wing_b": 8,
        "questions": [
            {"id": "7_q1", "option_a": "I check with others before big decisions", "option_b": "I trust my gut and decide quickly"},
            {"id": "7_q2", "option_a": "I'm loyal and stick with my people", "option_b": "I'm independent and go my own way"},
            {"id": "7_q3", "option_a": "I'm more anxious underneath my optimism", "option_b": "I'm more aggressive underneath my optimism"},
            {"id": "7_q4", "option_a": "Fun is better when shared with my group", "option_b": "Fun is about freedom and doing what I want"},
            {"id": "7_q5", "option_a": "I can be self-doubting despite my confidence", "option_b": "I'm genuinely confident and assertive"},
        ],
    },
    {
        "core_type": 8,
        "wing_a": 7,
        "wing_b": 9,
        "questions": [
            {"id": "8_q1", "option_a": "I seek excitement and new challenges", "option_b": "I seek stability and steady control"},
            {"id": "8_q2", "option_a": "I'm quick to act and move on", "option_b": "I'm patient and pick my battles"},
            {"id": "8_q3", "option_a": "I get restless and bored easily", "option_b": "I'm content once things are settled"},
            {"id": "8_q4", "option_a": "I confront problems immediately and directly", "option_b": "I wait for the right moment to act"},
            {"id": "8_q5", "option_a": "I want variety and multiple options", "option_b": "I want peace and simplicity"},
        ],
    },
    {
        "core_type": 9,
        "wing_a": 8,
        "wing_b": 1,
        "questions": [
            {"id": "9_q1", "option_a": "When pushed, I become stubborn and forceful", "option_b": "When pushed, I become critical and rigid"},
            {"id": "9_q2", "option_a": "I'm more direct and confrontational when needed", "option_b": "I'm more principled and judgmental when needed"},
            {"id": "9_q3", "option_a": "I value strength and standing my ground", "option_b": "I value being right and doing things properly"},
            {"id": "9_q4", "option_a": "My anger comes out as explosive force", "option_b": "My anger comes out as resentment and criticism"},
            {"id": "9_q5", "option_a": "I can be intimidating when I assert myself", "option_b": "I can be preachy when I assert myself"},
        ],
    },
]

# --- Part 4: Behavioural states ---
STATES = [
    {"code": "GRN", "level": 1, "internal_name": "Very Good State", "color": "#22c55e"},
    {"code": "BLU", "level": 2, "internal_name": "Good State", "color": "#3b82f6"},
    {"code": "YLW", "level": 3, "internal_name": "Average State", "color": "#eab308"},
    {"code": "ORG", "level": 4, "internal_name": "Below Average State", "color": "#f97316"},
    {"code": "RED", "level": 5, "internal_name": "Destructive State", "color": "#ef4444"},
]

# Every 3-of-5 combination; each state sits in exactly 6 triads.
TRIADS = [
    {"id": 1, "states": ["GRN", "BLU", "YLW"]},
    {"id": 2, "states": ["GRN", "BLU", "ORG"]},
    {"id": 3, "states": ["GRN", "BLU", "RED"]},
    {"id": 4, "states": ["GRN", "YLW", "ORG"]},
    {"id": 5, "states": ["GRN", "YLW", "RED"]},
    {"id": 6, "states": ["GRN", "ORG", "RED"]},
    {"id": 7, "states": ["BLU", "YLW", "ORG"]},
    {"id": 8, "states": ["BLU", "YLW", "RED"]},
    {"id": 9, "states": ["BLU", "ORG", "RED"]},
    {"id": 10, "states": ["YLW", "ORG", "RED"]},
]

# Three statements per state per type, shown inside the triads.
STATE_BEHAVIORS = {
    1: {
        "GRN": ["I accept that \"good enough\" is often enough", "I laugh at my own imperfections", "I inspire through example, not criticism"],
        "BLU": ["I hold high standards while allowing for mistakes", "I speak up about what's wrong but offer solutions", "I follow my principles even when inconvenient"],
        "YLW": ["I notice errors and feel compelled to point them out", "I have a running mental checklist of what needs improving", "I work harder than others to make sure things are done right"],
        "ORG": ["I get frustrated when others don't meet my standards", "I criticize more than I praise", "I feel resentful carrying the burden of responsibility"],
        "RED": ["I exempt myself from rules I impose on others", "I become harsh and unforgiving when standards slip", "I become moody and feel nobody understands how hard I try"],
    },
    2: {
        "GRN": ["I give without keeping track of what I'm owed", "I take care of my own needs without guilt", "I love others without needing them to need me"],
        "BLU": ["I offer help but respect when it's declined", "I express my own needs directly", "I support people while trusting they can handle things"],
        "YLW": ["I sense what others need before they ask", "I make myself indispensable to important people", "I show different sides of myself depending on who I'm with"],
        "ORG": ["I remind people of what I've done for them", "I give advice even when it's not requested", "I feel hurt when my help isn't appreciated enough"],
        "RED": ["I become aggressive when I feel taken for granted", "I manipulate through guilt about all I've sacrificed", "I feel entitled to control those I've helped"],
    },
    3: {
        "GRN": ["My worth doesn't depend on my achievements", "I can be vulnerable about my failures", "I help others succeed without needing credit"],
        "BLU": ["I work hard but know when to stop", "I'm authentic even when it's not impressive", "I celebrate others' success genuinely"],
        "YLW": ["I'm always working on the next achievement", "I adapt my image to what each situation requires", "I compare myself to others to gauge my success"],
        "ORG": ["I exaggerate accomplishments to stay impressive", "I cut corners to maintain my successful image", "I dismiss others who might outshine me"],
        "RED": ["I deceive others to protect my reputation", "I've become an empty shell just going through motions", "I sabotage anyone who threatens my position"],
    },
    4: {
        "GRN": ["I create from a place of fullness, not emptiness", "I find beauty in ordinary moments", "I transform my pain into something that helps others"],
        "BLU": ["I express my feelings without being consumed by them", "I appreciate what I have while honoring what I feel", "I connect with others through shared humanity"],
        "YLW": ["I feel different from others in ways they don't understand", "I dwell on what's missing in my life", "I express myself to stand out from the crowd"],
        "ORG": ["I push people away then feel abandoned", "I wallow in my emotions to prove how deeply I feel", "I resent those who seem to have what I lack"],
        "RED": ["I've given up on ever being truly happy", "I demand constant proof that people love me", "I don't know who I'd be without my pain"],
    },
    5: {
        "GRN": ["I share my knowledge generously with others", "I engage with life, not just observe it", "I trust my competence without needing more preparation"],
        "BLU": ["I balance thinking with doing", "I connect with people while maintaining boundaries", "I contribute my expertise when it's needed"],
        "YLW": ["I find social interaction draining even when I enjoy it", "I prefer to observe before participating", "I accumulate knowledge in case I need it later"],
        "ORG": ["I withdraw when demands feel overwhelming", "I hoard resources, time, and energy", "I disconnect from feelings to stay functional"],
        "RED": ["I've cut myself off from almost everyone", "I reject the world that feels too demanding", "I jump frantically between distractions to escape myself"],
    },
    6: {
        "GRN": ["I trust myself to handle whatever comes", "I feel secure even in uncertain situations", "I give others the benefit of the doubt"],
        "BLU": ["I prepare reasonably but don't over-worry", "I'm loyal while maintaining my own judgment", "I face fears rather than avoiding them"],
        "YLW": ["I scan for what could go wrong in situations", "I seek reassurance from authorities or trusted people", "I question people's motives even when they seem supportive"],
        "ORG": ["I suspect hidden agendas in people's actions", "I become defensive when I feel questioned", "I divide people into allies and potential threats"],
        "RED": ["I see enemies and conspiracies everywhere", "I attack first to prevent being attacked", "I lash out and blame others to protect my position"],
    },
    7: {
        "GRN": ["I find deep satisfaction in simple moments", "I stay present even when things get hard", "I commit fully to what matters most"],
        "BLU": ["I pursue joy while honoring responsibilities", "I process difficult emotions instead of avoiding them", "I follow through on commitments even when bored"],
        "YLW": ["I keep my options open to avoid missing out", "I reframe negatives into positives quickly", "I plan future experiences to stay excited"],
        "ORG": ["I escape into distractions when things get hard", "I become scattered trying to do everything", "I resent anything that limits my freedom"],
        "RED": ["I'll do anything to avoid pain or boredom", "I've burned through relationships and experiences", "I become harsh and critical when I can't escape my pain"],
    },
    8: {
        "GRN": ["I use my power to lift others up, not control them", "I openly share what I'm struggling with", "I champion causes bigger than myself"],
        "BLU": ["I speak directly but make sure people feel respected", "I take responsibility when things go wrong", "I set firm boundaries without intimidating"],
        "YLW": ["I take charge of situations automatically", "I decide quickly and expect others to keep up", "I test people before I fully trust them"],
        "ORG": ["I raise my intensity until people back down", "I refuse to show weakness even when I'm hurting", "I write people off when they disappoint me"],
        "RED": ["Once someone crosses me, I cut them out permanently", "I'd rather blow things up than let someone control me", "I strike first before threats can materialize"],
    },
    9: {
        "GRN": ["I'm fully present and engaged with life", "I take action on what matters to me", "I stay connected to myself even in conflict"],
        "BLU": ["I express my preferences without causing drama", "I create genuine harmony, not just surface peace", "I balance others' needs with my own"],
        "YLW": ["I go along with others to keep the peace", "I avoid topics that might cause conflict", "I tune out when things get too intense"],
        "ORG": ["I honestly don't know what I want most of the time", "I become stubborn when pushed too hard", "I disappear emotionally from difficult situations"],
        "RED": ["I've checked out completely from my life", "When pushed too far, I snap and blame everyone around me", "I neglect everything, including myself"],
    },
}

# --- Part 5: Instinct battles ---
INSTINCTS = [
    {"code": "sp", "name": "Self-Preservation"},
    {"code": "sx", "name": "One-to-One"},
    {"code": "so", "name": "Social"},
]

BATTLES = [
    {"id": 1, "left": "sp", "right": "sx",
     "left_text": "I secure my basics first", "right_text": "I chase deep connection first"},
    {"id": 2, "left": "sp", "right": "so",
     "left_text": "I protect my resources carefully", "right_text": "I stay plugged into my circles"},
    {"id": 3, "left": "sx", "right": "so",
     "left_text": "One deep bond beats many", "right_text": "Being part of groups energizes me"},
]
