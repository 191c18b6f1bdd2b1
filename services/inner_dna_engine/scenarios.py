# services/inner_dna_engine/scenarios.py
# Hero Moments scenario bank. General scenarios carry one option per type;
# targeted scenarios only carry options for their target_types and are used
# once the narrower has a clear leader.


def _options(prefix, texts, confidences=None):
    """Builds option dicts keyed by type from a {type: text} mapping."""
    confidences = confidences or {}
    return [
        {
            "id": f"{prefix}-t{personality_type}",
            "text": text,
            "personality_type": personality_type,
            "confidence": confidences.get(personality_type, 0.85),
        }
        for personality_type, text in texts.items()
    ]


GENERAL_SCENARIOS = [
    {
        "id": "gen-01",
        "title": "The Missed Deadline",
        "context": "Your team has just learned that a major deliverable will be late.",
        "prompt": "What is your first move?",
        "difficulty": "easy",
        "options": _options("gen-01", {
            1: "Find exactly where the process broke so it never happens again",
            2: "Check in on the people who are most stressed by the news",
            3: "Re-plan fast and find a way to still look strong to the client",
            4: "Feel the disappointment first, then look for what it means",
            5: "Step back and analyse what actually went wrong before saying anything",
            6: "List every risk the delay creates and who needs to be warned",
            7: "Reframe it as a chance to add something better to the launch",
            8: "Take control of the room and assign who fixes what",
            9: "Calm everyone down so the team does not fall apart",
        }),
    },
    {
        "id": "gen-02",
        "title": "The Surprise Free Weekend",
        "context": "Your plans fall through and you suddenly have two free days.",
        "prompt": "How do you spend them?",
        "difficulty": "easy",
        "options": _options("gen-02", {
            1: "Finally tackle the chores and projects that have been nagging me",
            2: "Call friends who might need company or a hand",
            3: "Get ahead on goals so Monday starts with a win",
            4: "Make something personal, like writing, music or art",
            5: "Disappear into a book or a topic I want to master",
            6: "Catch up on what needs doing so nothing surprises me later",
            7: "Say yes to the first fun adventure that comes up",
            8: "Do something physical and intense that tests my limits",
            9: "Relax at home with no agenda at all",
        }),
    },
    {
        "id": "gen-03",
        "title": "The Heated Meeting",
        "context": "Two colleagues start arguing loudly during a meeting you attend.",
        "prompt": "What do you do?",
        "difficulty": "medium",
        "options": _options("gen-03", {
            1: "Point out which of them is actually right on the facts",
            2: "Reach out afterwards to make sure both feel heard",
            3: "Steer the meeting back to the outcome we need",
            4: "Notice the emotional undercurrent nobody is naming",
            5: "Observe quietly and figure out the real source of conflict",
            6: "Worry about what this means for the team's stability",
            7: "Crack a joke to break the tension",
            8: "Step in and shut the argument down directly",
            9: "Find the common ground so everyone can settle",
        }),
    },
    {
        "id": "gen-04",
        "title": "The Unexpected Praise",
        "context": "Your manager praises your work in front of the whole company.",
        "prompt": "What goes through your mind?",
        "difficulty": "medium",
        "options": _options("gen-04", {
            1: "I notice the small flaws they did not mention",
            2: "I hope the people who helped me feel appreciated too",
            3: "Good, this will matter for my next promotion",
            4: "I wonder if they really see what makes my work different",
            5: "I would rather they had told me privately",
            6: "I wonder whether this puts a target on my back",
            7: "Great, time to celebrate and plan the next big thing",
            8: "About time; I earned that",
            9: "I feel a bit awkward with all the attention on me",
        }),
    },
    {
        "id": "gen-05",
        "title": "The Friend in Crisis",
        "context": "A close friend calls late at night, clearly upset.",
        "prompt": "How do you respond?",
        "difficulty": "easy",
        "options": _options("gen-05", {
            1: "Help them see what the right thing to do is",
            2: "Drop everything and go to them",
            3: "Help them make a plan to get back on their feet",
            4: "Stay with them in the feeling without trying to fix it",
            5: "Listen carefully and offer a clear perspective",
            6: "Ask questions to understand how serious the danger is",
            7: "Try to lift their mood and distract them",
            8: "Offer to confront whoever hurt them",
            9: "Stay on the line and keep them calm for as long as it takes",
        }),
    },
    {
        "id": "gen-06",
        "title": "The New Job Offer",
        "context": "You receive an offer that pays more but means leaving a team you know.",
        "prompt": "What decides it for you?",
        "difficulty": "medium",
        "options": _options("gen-06", {
            1: "Which choice is the more responsible one",
            2: "How the people I leave behind will cope",
            3: "Which role does more for my career trajectory",
            4: "Which role lets me be more authentically myself",
            5: "Which role gives me more autonomy and time to think",
            6: "Which choice is safer in the long run",
            7: "Which role has more excitement and new experiences",
            8: "Which role gives me more power and control",
            9: "Which choice will cause the least disruption",
        }),
    },
    {
        "id": "gen-07",
        "title": "The Group Project",
        "context": "You are assigned to a group project with people you barely know.",
        "prompt": "What role do you naturally take?",
        "difficulty": "easy",
        "options": _options("gen-07", {
            1: "The one who sets the quality bar",
            2: "The one who makes sure everyone feels included",
            3: "The one who drives toward a winning result",
            4: "The one who brings the original creative angle",
            5: "The researcher who knows the details cold",
            6: "The one who spots problems before they happen",
            7: "The one who generates ideas and keeps it fun",
            8: "The leader who makes the final calls",
            9: "The mediator who keeps the group together",
        }),
    },
    {
        "id": "gen-08",
        "title": "The Criticism",
        "context": "Someone you respect criticises your work harshly.",
        "prompt": "What is your gut reaction?",
        "difficulty": "hard",
        "options": _options("gen-08", {
            1: "I feel the sting because I should have caught it myself",
            2: "I feel hurt that they do not see how much I put in",
            3: "I worry how this affects the way others see me",
            4: "I feel misunderstood at a deep level",
            5: "I want to examine whether they are actually right",
            6: "I start doubting myself and second-guessing everything",
            7: "I brush it off and focus on the positives",
            8: "I push back if I think they are wrong",
            9: "I nod along and avoid making it a bigger issue",
        }, {1: 0.9, 4: 0.9, 6: 0.9}),
    },
    {
        "id": "gen-09",
        "title": "The Power Outage",
        "context": "The power goes out across your neighbourhood for the whole evening.",
        "prompt": "What do you do?",
        "difficulty": "easy",
        "options": _options("gen-09", {
            1: "Organise the candles and supplies properly",
            2: "Check on the elderly neighbours",
            3: "Use the time to plan tomorrow's priorities",
            4: "Enjoy the mood and atmosphere of the candlelight",
            5: "Figure out what caused the outage",
            6: "Make sure we have what we need if it lasts longer",
            7: "Turn it into an impromptu party",
            8: "Call the utility company and demand answers",
            9: "Take it as an excuse to go to bed early",
        }, {9: 0.75}),
    },
    {
        "id": "gen-10",
        "title": "The Big Decision",
        "context": "You must make a major decision with incomplete information.",
        "prompt": "How do you handle it?",
        "difficulty": "hard",
        "options": _options("gen-10", {
            1: "Stick to my principles and do what is right",
            2: "Ask how the decision will affect the people I care about",
            3: "Pick the option most likely to succeed and commit",
            4: "Follow what feels most true to who I am",
            5: "Gather more information until I understand it",
            6: "Consult people I trust before committing",
            7: "Keep my options open as long as possible",
            8: "Decide quickly and deal with consequences later",
            9: "Put it off and hope it resolves itself",
        }, {5: 0.9, 6: 0.9}),
    },
    {
        "id": "gen-11",
        "title": "The Party Invitation",
        "context": "You are invited to a large party where you know almost no one.",
        "prompt": "How do you approach it?",
        "difficulty": "medium",
        "options": _options("gen-11", {
            1: "Go, but leave at a sensible hour",
            2: "Help the host and meet people that way",
            3: "Network with the most interesting people there",
            4: "Find one person for a deep conversation",
            5: "Probably skip it, or watch from the edges",
            6: "Bring a friend so I feel more secure",
            7: "Dive in and meet as many people as possible",
            8: "Walk in like I own the room",
            9: "Go along and blend in comfortably",
        }),
    },
    {
        "id": "gen-12",
        "title": "The Broken Rule",
        "context": "You notice a coworker quietly bending an important company rule.",
        "prompt": "What do you do?",
        "difficulty": "hard",
        "options": _options("gen-12", {
            1: "Tell them directly that it is wrong",
            2: "Talk to them privately to understand what they are dealing with",
            3: "Consider whether it affects my results before acting",
            4: "Wonder what pushed them to it",
            5: "Note it and keep watching before drawing conclusions",
            6: "Report it to the right person, just to be safe",
            7: "Let it go; rules are often too rigid anyway",
            8: "Confront them on the spot",
            9: "Pretend I did not see it",
        }, {1: 0.95, 6: 0.9}),
    },
    {
        "id": "gen-13",
        "title": "The Windfall",
        "context": "You unexpectedly receive a large sum of money.",
        "prompt": "What is your first thought?",
        "difficulty": "medium",
        "options": _options("gen-13", {
            1: "Put it toward the responsible thing",
            2: "Use it to help people close to me",
            3: "Invest it in my next big goal",
            4: "Spend it on something meaningful and beautiful",
            5: "Save it so I never have to depend on anyone",
            6: "Build an emergency cushion first",
            7: "Book the trip I have been dreaming about",
            8: "Use it to gain more independence and leverage",
            9: "Leave it in the bank and not think about it",
        }),
    },
    {
        "id": "gen-14",
        "title": "The Long Queue",
        "context": "You have been waiting in a slow queue for forty minutes.",
        "prompt": "What is happening inside you?",
        "difficulty": "easy",
        "options": _options("gen-14", {
            1: "Irritation at how badly this is organised",
            2: "Chatting with the person next to me",
            3: "Answering emails so the time is not wasted",
            4: "Daydreaming about a different life",
            5: "Reading something I brought for exactly this",
            6: "Wondering if I am even in the right line",
            7: "Restlessness; I start looking for a way out",
            8: "Ready to go find the manager",
            9: "Content to just wait it out",
        }, {7: 0.8}),
    },
    {
        "id": "gen-15",
        "title": "The Personal Milestone",
        "context": "You reach a goal you have worked toward for years.",
        "prompt": "How do you feel?",
        "difficulty": "medium",
        "options": _options("gen-15", {
            1: "Satisfied, though I see how it could have been done better",
            2: "Grateful to everyone who supported me",
            3: "Proud, and already eyeing the next target",
            4: "Bittersweet; it is not quite what I imagined",
            5: "Quietly confident that I understood the path",
            6: "Relieved that nothing went wrong",
            7: "Thrilled, let's celebrate",
            8: "Powerful; I made it happen",
            9: "Peaceful and at ease",
        }),
    },
]

# Targeted scenarios discriminate between types that commonly get confused:
# the three centres, the three stances and the three harmonic groups.
TARGETED_SCENARIOS = [
    {
        "id": "tgt-gut",
        "title": "The Line in the Sand",
        "context": "Someone keeps ignoring a boundary you set.",
        "prompt": "What do you do?",
        "difficulty": "hard",
        "target_types": [8, 9, 1],
        "options": _options("tgt-gut", {
            8: "Enforce it immediately and make the consequence clear",
            9: "Hope it stops on its own and quietly withdraw",
            1: "Explain firmly why what they are doing is wrong",
        }, {8: 0.95, 9: 0.95, 1: 0.95}),
    },
    {
        "id": "tgt-heart",
        "title": "The Forgotten Birthday",
        "context": "People close to you forget your birthday.",
        "prompt": "What stings most?",
        "difficulty": "hard",
        "target_types": [2, 3, 4],
        "options": _options("tgt-heart", {
            2: "That after all I do for them, they did not think of me",
            3: "That I apparently was not important enough to remember",
            4: "That, as always, nobody really sees me",
        }, {2: 0.95, 3: 0.9, 4: 0.95}),
    },
    {
        "id": "tgt-head",
        "title": "The Uncertain Future",
        "context": "Rumours spread that your organisation may restructure.",
        "prompt": "How do you cope?",
        "difficulty": "hard",
        "target_types": [5, 6, 7],
        "options": _options("tgt-head", {
            5: "Research what is really happening and keep to myself",
            6: "Prepare for the worst and seek people I can count on",
            7: "Look at the upside and line up exciting alternatives",
        }, {5: 0.95, 6: 0.95, 7: 0.95}),
    },
    {
        "id": "tgt-assertive",
        "title": "The Stalled Project",
        "context": "A project you care about has stalled for weeks.",
        "prompt": "What drives your response?",
        "difficulty": "hard",
        "target_types": [3, 7, 8],
        "options": _options("tgt-assertive", {
            3: "A stalled project reflects badly on me; I get it moving",
            7: "I get bored and start something more interesting",
            8: "I take over and force it forward",
        }, {3: 0.9, 7: 0.9, 8: 0.95}),
    },
    {
        "id": "tgt-compliant",
        "title": "The Request for Help",
        "context": "A senior colleague asks you to take on extra work.",
        "prompt": "Why would you say yes?",
        "difficulty": "hard",
        "target_types": [1, 2, 6],
        "options": _options("tgt-compliant", {
            1: "Because it is my duty to do it properly",
            2: "Because they need me and I want to be there for them",
            6: "Because saying no might put my position at risk",
        }, {1: 0.9, 2: 0.95, 6: 0.9}),
    },
    {
        "id": "tgt-withdrawn",
        "title": "The Overwhelming Week",
        "context": "You face a week of back-to-back demands from others.",
        "prompt": "Where do you retreat?",
        "difficulty": "hard",
        "target_types": [4, 5, 9],
        "options": _options("tgt-withdrawn", {
            4: "Into my feelings and my inner world",
            5: "Into my head and my private space",
            9: "Into comfortable routines that numb it all",
        }, {4: 0.95, 5: 0.95, 9: 0.95}),
    },
    {
        "id": "tgt-positive",
        "title": "The Bad News",
        "context": "You receive disappointing news about something you hoped for.",
        "prompt": "How do you handle it?",
        "difficulty": "hard",
        "target_types": [2, 7, 9],
        "options": _options("tgt-positive", {
            2: "Focus on supporting others who are affected",
            7: "Quickly find the silver lining and move on",
            9: "Tell myself it is really not a big deal",
        }, {2: 0.9, 7: 0.95, 9: 0.9}),
    },
    {
        "id": "tgt-competency",
        "title": "The Emotional Conversation",
        "context": "A colleague becomes emotional while you are working through a problem.",
        "prompt": "What is your instinct?",
        "difficulty": "hard",
        "target_types": [1, 3, 5],
        "options": _options("tgt-competency", {
            1: "Keep to what is correct and fair, and set feelings aside",
            3: "Keep things professional and move toward the goal",
            5: "Step back into analysis until the emotion passes",
        }, {1: 0.9, 3: 0.9, 5: 0.95}),
    },
    {
        "id": "tgt-reactive",
        "title": "The Betrayal",
        "context": "You discover a friend has been talking about you behind your back.",
        "prompt": "What is your response?",
        "difficulty": "hard",
        "target_types": [4, 6, 8],
        "options": _options("tgt-reactive", {
            4: "I feel deeply wounded and need them to understand how much",
            6: "I knew something was off; I question all my friendships",
            8: "I confront them and they are out of my life",
        }, {4: 0.95, 6: 0.95, 8: 0.95}),
    },
]
