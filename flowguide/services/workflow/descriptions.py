"""Readable one-line descriptions for build steps.

Descriptions are looked up by exact node type. Unknown types fall back to a
generic sentence built from the step name.
"""

from __future__ import annotations

from flowguide.services.workflow.types import ReturnStep, Step

NODE_TYPE_DESCRIPTIONS: dict[str, str] = {
    # Triggers
    "n8n-nodes-base.formTrigger": "Receives form submissions and triggers the workflow",
    "n8n-nodes-base.webhook": "Receives incoming webhook requests from external services",
    "n8n-nodes-base.manualTrigger": "Manually starts the workflow execution",
    "n8n-nodes-base.scheduleTrigger": "Triggers the workflow on a schedule",
    "n8n-nodes-base.cronTrigger": "Triggers the workflow using a cron expression",
    "n8n-nodes-base.intervalTrigger": "Triggers the workflow at regular time intervals",
    "n8n-nodes-base.emailTrigger": "Triggers the workflow when emails are received",
    "n8n-nodes-base.executeWorkflowTrigger": "Triggers when called by another workflow",
    "@n8n/n8n-nodes-langchain.chatTrigger": "Opens a chat interface for AI conversations",
    # HTTP & API
    "n8n-nodes-base.httpRequest": "Makes HTTP requests to external APIs or services",
    "n8n-nodes-base.respondToWebhook": "Sends a response back to the incoming webhook request",
    # Google
    "n8n-nodes-base.googleDrive": "Uploads, downloads or manages files in Google Drive",
    "n8n-nodes-base.googleSheets": "Reads from and writes to Google Sheets spreadsheets",
    "n8n-nodes-base.gmail": "Sends emails and manages Gmail messages",
    "n8n-nodes-base.googleCalendar": "Creates and manages events in Google Calendar",
    "n8n-nodes-base.googleDocs": "Creates and manages Google Documents",
    # Microsoft
    "n8n-nodes-base.microsoftExcel": "Reads from and writes to Microsoft Excel files",
    "n8n-nodes-base.microsoftOutlook": "Sends emails and manages Outlook messages and events",
    "n8n-nodes-base.microsoftTeams": "Sends messages and manages Microsoft Teams",
    "n8n-nodes-base.oneDrive": "Uploads, downloads or manages files in OneDrive",
    # Messaging
    "n8n-nodes-base.slack": "Sends messages and manages Slack channels and users",
    "n8n-nodes-base.discord": "Sends messages to Discord servers and channels",
    "n8n-nodes-base.telegram": "Sends messages via a Telegram bot",
    "n8n-nodes-base.whatsApp": "Sends WhatsApp messages through the API",
    # AI
    "@n8n/n8n-nodes-langchain.agent": "Uses an AI agent to process and answer requests",
    "@n8n/n8n-nodes-langchain.lmChatOpenAi": "Provides an OpenAI chat model to the AI node",
    "@n8n/n8n-nodes-langchain.lmChatAnthropic": "Provides an Anthropic chat model to the AI node",
    "@n8n/n8n-nodes-langchain.openAi": "Integrates with OpenAI services for content generation",
    "@n8n/n8n-nodes-langchain.memoryBufferWindow": "Provides conversation memory for AI chats",
    "@n8n/n8n-nodes-langchain.toolHttpRequest": "Gives the AI agent a tool that makes HTTP requests",
    "@n8n/n8n-nodes-langchain.toolWorkflow": "Gives the AI agent a tool that runs another workflow",
    "@n8n/n8n-nodes-langchain.outputParserStructured": "Parses AI output into structured data",
    # Databases
    "n8n-nodes-base.postgres": "Connects to and queries PostgreSQL databases",
    "n8n-nodes-base.mysql": "Connects to and queries MySQL databases",
    "n8n-nodes-base.mongoDb": "Connects to and queries MongoDB databases",
    "n8n-nodes-base.redis": "Stores and retrieves data from Redis",
    "n8n-nodes-base.airtable": "Reads from and writes to Airtable bases",
    "n8n-nodes-base.notion": "Creates and manages content in a Notion workspace",
    # Files
    "n8n-nodes-base.convertToFile": "Converts data into a file for download or storage",
    "n8n-nodes-base.readBinaryFile": "Reads binary files from the file system",
    "n8n-nodes-base.writeBinaryFile": "Writes binary data to files",
    "n8n-nodes-base.awsS3": "Uploads, downloads and manages files in Amazon S3",
    # Data processing
    "n8n-nodes-base.code": "Runs custom JavaScript code to process data",
    "n8n-nodes-base.set": "Sets or modifies data values in the workflow",
    "n8n-nodes-base.merge": "Combines data coming from several workflow branches",
    "n8n-nodes-base.sort": "Sorts items by the given criteria",
    "n8n-nodes-base.filter": "Filters items by the given conditions",
    "n8n-nodes-base.aggregate": "Aggregates items into a single result",
    "n8n-nodes-base.splitInBatches": "Splits large datasets into smaller batches",
    # Control flow
    "n8n-nodes-base.if": "Creates conditional logic and branching in the workflow",
    "n8n-nodes-base.switch": "Routes data through different paths based on rules",
    "n8n-nodes-base.wait": "Pauses the workflow for a specified duration",
    "n8n-nodes-base.stopAndError": "Stops the workflow and raises an error",
    "n8n-nodes-base.noOp": "Does nothing; used to organize the workflow",
    # Utilities
    "n8n-nodes-base.html": "Extracts data from HTML content",
    "n8n-nodes-base.markdown": "Converts between Markdown and HTML",
    "n8n-nodes-base.dateTime": "Manipulates and formats date and time values",
    "n8n-nodes-base.rssFeedRead": "Reads and parses RSS feed content",
}


def describe_step(step: Step) -> str:
    """Return a readable description for a build step."""
    if isinstance(step, ReturnStep):
        return f"Return to '{step.return_to_node_name}' to build the next branch"
    return NODE_TYPE_DESCRIPTIONS.get(step.type, f"Executes {step.name} operation")


__all__ = [
    "NODE_TYPE_DESCRIPTIONS",
    "describe_step",
]
