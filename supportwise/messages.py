"""Scripted bot messages. Links use the allow-listed anchor markup from data_models.markup."""

SUPPORT_EMAIL_LINK = "<a href='mailto:support@thoughtful.ai'>support@thoughtful.ai</a>"

WELCOME_MESSAGES = [
    "Hello! I'm the Thoughtful AI Support Agent. How can I help you today?",
    "Welcome to Thoughtful AI support! I'm here to answer your questions about our healthcare agents.",
    "Hi there! I'm your Thoughtful AI assistant. What would you like to know about our healthcare automation solutions?",
]

WELCOME_BACK_MESSAGES = [
    "Welcome back! How can I assist you with Thoughtful AI's healthcare agents today?",
    "Good to see you again! What questions do you have about our healthcare automation solutions?",
    "Hello again! I'm here to help with any questions about Thoughtful AI's healthcare agents.",
]

CHECK_IN_MESSAGES = [
    "Is there anything else you'd like to know about Thoughtful AI's healthcare agents?",
    "Do you have any other questions I can help with?",
    "Is there something specific about our healthcare automation solutions you're interested in?",
]

FAREWELL_MESSAGES = [
    "Thank you for chatting with Thoughtful AI Support. Have a great day!",
    "It was a pleasure assisting you. Feel free to return if you have more questions!",
    "Thanks for your interest in Thoughtful AI. Don't hesitate to reach out if you need further assistance!",
]

RESOURCE_SUGGESTIONS = [
    "I don't have that specific information in my knowledge base. For more details, please visit our documentation at "
    "<a href='https://docs.thoughtful.ai' target='_blank' rel='noopener noreferrer'>docs.thoughtful.ai</a> "
    f"or contact our support team at {SUPPORT_EMAIL_LINK}.",
    "That's beyond my current knowledge. For assistance with this specific question, please reach out to our support "
    f"team at {SUPPORT_EMAIL_LINK} or call us at 1-800-THOUGHTFUL.",
    "I'm not able to provide that information. You can find more details about our healthcare agents on our "
    "<a href='https://www.thoughtful.ai/agents' target='_blank' rel='noopener noreferrer'>agents page</a> "
    "or by contacting our team directly.",
    "I don't have that information available. For detailed answers about this topic, please consult our "
    "<a href='https://www.thoughtful.ai/faq' target='_blank' rel='noopener noreferrer'>FAQ page</a> "
    "or contact our customer support.",
]

DETAILED_RESOURCE_MESSAGE = (
    "I don't have that specific information in my knowledge base. For detailed information about this topic, "
    "please visit our comprehensive documentation at "
    "<a href='https://docs.thoughtful.ai' target='_blank' rel='noopener noreferrer'>docs.thoughtful.ai</a> "
    f"or contact our expert support team at {SUPPORT_EMAIL_LINK}."
)

AGENT_RESOURCE_TEMPLATE = (
    "I don't have that specific information about {agent}. You can learn more about {agent} on our "
    "<a href='https://www.thoughtful.ai/agents/{slug}' target='_blank' rel='noopener noreferrer'>{agent} page</a> "
    f"or contact our support team at {SUPPORT_EMAIL_LINK}."
)

GENERIC_RESOURCE_MESSAGE = (
    "I don't have that information in my knowledge base. You can learn more on our "
    "<a href='https://www.thoughtful.ai' target='_blank' rel='noopener noreferrer'>website</a> "
    f"or contact our support team at {SUPPORT_EMAIL_LINK}."
)

RESOURCE_SUGGESTION_ERROR_MESSAGE = (
    "I don't have that information. Please contact our support team at support@thoughtful.ai for assistance."
)

INTENT_RESPONSES = {
    "greeting": "Hello! I'm here to help with questions about Thoughtful AI's healthcare agents. What would you like to know?",
    "thanks": "You're welcome! Is there anything else you'd like to know about Thoughtful AI's healthcare agents?",
    "help": (
        "I can provide information about Thoughtful AI's healthcare agents like EVA (eligibility verification), "
        "CAM (claims processing), and PHIL (payment posting). What would you like to know about these agents?"
    ),
    "contact": (
        f"You can contact our support team via email at {SUPPORT_EMAIL_LINK} or by phone at 1-800-THOUGHTFUL. "
        "Our team is available Monday through Friday, 9am to 5pm Eastern Time."
    ),
}

FOLLOW_UP_ELABORATIONS = {
    "eligibility_verification": (
        "EVA, our eligibility verification agent, connects with payer systems to verify patient insurance in "
        "real-time. It can check coverage details, co-pays, deductibles, and authorization requirements, "
        "significantly reducing manual work and errors."
    ),
    "claims_processing": (
        "CAM, our claims processing agent, handles the entire claims lifecycle. It can validate claim information, "
        "check for errors before submission, track claim status, and even help with denial management."
    ),
    "payment_posting": (
        "PHIL, our payment posting agent, automatically reconciles payments with claims, handles EOBs and ERAs, "
        "identifies underpayments, and updates your financial systems with accurate payment information."
    ),
    "agents": (
        "Our AI agents work together to automate the entire revenue cycle. They're designed to integrate with your "
        "existing systems and can be customized to your specific workflows and requirements."
    ),
    "benefits": (
        "The key benefits of our agents include reduced operational costs, faster reimbursements, fewer denials, "
        "improved cash flow, and allowing your staff to focus on higher-value tasks instead of routine processing."
    ),
}

RESOURCES_ALREADY_SHARED_MESSAGE = (
    "I've shared some resources that might help. Is there something specific about our healthcare agents "
    "(EVA, CAM, or PHIL) that you'd like to know?"
)

TOPIC_TEASERS = {
    "eligibility_verification": (
        "While I don't have specific information about that, I can tell you that our eligibility verification agent "
        "(EVA) automates insurance verification in real-time. Would you like to know more about EVA?"
    ),
    "claims_processing": (
        "I don't have specific details on that, but our claims processing agent (CAM) streamlines claims submission "
        "and management. Would you like to learn more about CAM?"
    ),
    "payment_posting": (
        "I don't have that specific information, but our payment posting agent (PHIL) automates payment "
        "reconciliation and posting. Would you like to know more about PHIL?"
    ),
}

GENERATION_ERROR_MESSAGE = (
    "I'm specifically trained on Thoughtful AI's healthcare agents. For other questions, please visit our website at "
    "https://www.thoughtful.ai or contact our support team at support@thoughtful.ai."
)

APOLOGY_MESSAGE = (
    "I'm sorry, I encountered an error processing your request. Please try again or contact our support team at "
    "support@thoughtful.ai."
)
