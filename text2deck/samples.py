"""Built-in sample input."""

SAMPLE_TEXT = """# Introduction to Artificial Intelligence

Artificial Intelligence (AI) represents one of the most transformative technologies of our time. This presentation will explore the fundamental concepts, applications, and future implications of AI.

## What is AI?

AI refers to computer systems that can perform tasks typically requiring human intelligence. These include learning, reasoning, perception, and decision-making.

## Key Applications

- Healthcare: Diagnostic assistance and drug discovery
- Transportation: Autonomous vehicles and traffic optimization
- Finance: Fraud detection and algorithmic trading
- Education: Personalized learning and intelligent tutoring

## Benefits and Challenges

### Benefits
- Increased efficiency and productivity
- Enhanced decision-making capabilities
- Automation of repetitive tasks
- Innovation in research and development

### Challenges
- Ethical considerations and bias
- Job displacement concerns
- Privacy and security issues
- Need for regulatory frameworks

## Future Outlook

AI will continue to evolve and integrate into various aspects of society. The key to success lies in responsible development and deployment.

## Conclusion

As we advance into an AI-driven future, it's crucial to balance innovation with ethical considerations and human values."""
