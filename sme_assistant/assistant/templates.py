from __future__ import annotations

"""Response templates for local synthesis.

Keys are (topic, question type, specificity); None matches any value.
Each entry holds one or more variants, formatted with live knowledge-base
counts: cujs, slis, slos, best_practices, knowledge_total, documents,
context_files, uploads, maturity_levels and maturity_list.
"""

from sme_assistant.agents.intent import QuestionType, Specificity, Topic

TemplateKey = tuple[Topic, QuestionType | None, Specificity | None]


SYSTEM_PROMPT = (
    "You are a DevSecOps Subject Matter Expert (SME) assistant specializing in Critical "
    "User Journeys (CUJs), Service Level Indicators (SLIs) and Service Level Objectives "
    "(SLOs).\n\n"
    "Your expertise includes DevSecOps practices, observability and monitoring strategy, "
    "CUJ analysis, SLI/SLO implementation, security in CI/CD pipelines and the 4-level "
    "observability maturity model (metrics-driven, shifting from logs to metrics; tools: "
    "Observe for logging, Obstack for metrics, PagerDuty for alerting).\n\n"
    "Respond in a conversational, helpful manner. Give practical, actionable advice and "
    "explain technical concepts clearly with examples when relevant."
)

CONTEXT_SUMMARY = (
    "Current Knowledge Base:\n"
    "- CUJs: {cujs} items\n"
    "- SLIs: {slis} items\n"
    "- SLOs: {slos} items\n"
    "- Best Practices: {best_practices} items\n"
    "- Documents loaded: {documents} ({context_files} context files, {uploads} uploads)"
)

SNIPPETS_HEADER = "**From your documentation:**"


TEMPLATES: dict[TemplateKey, tuple[str, ...]] = {
    (Topic.CUJ, QuestionType.HOW, Specificity.BEGINNER): (
        """Let me walk you through getting started with Critical User Journeys (CUJs).

**Step 1: Identify your customers**
• End users of your application
• Other applications that depend on yours
• Other teams and internal stakeholders

**Step 2: Map the journey**
• Entry point: how does the interaction start?
• Exit point: what marks successful completion?
• Dependencies: what do you rely on, and what relies on you?

**Step 3: Anchor it on business value**
For example: "Customer places order → Payment processed → Order confirmed → Delivery scheduled"

**Current status:** You have {cujs} CUJs in your knowledge base. Would you like help defining one for your application?""",
    ),
    (Topic.CUJ, QuestionType.WHAT, None): (
        """Critical User Journeys (CUJs) are end-to-end workflows that deliver business value to your customers.

**Why they matter:**
• They focus monitoring on what actually affects users
• They drive your SLI/SLO strategy (you currently have {slis} SLIs and {slos} SLOs)
• They connect technical metrics to business outcomes

**Example structure:**
"User initiates payment → Account validation → Payment processing → Confirmation delivered"

Each segment can be measured on its own, which makes problems easier to locate.

**Your knowledge base:** {cujs} CUJs defined so far.""",
    ),
    (Topic.CUJ, None, None): (
        "Critical User Journeys (CUJs) are end-to-end workflows that show how users interact with your system. They tell you what matters most to measure. You have {cujs} CUJs defined.",
        "When defining CUJs, start with your customers (end users, other apps, other teams), then map each journey from entry to exit including its dependencies. You have {cujs} CUJs defined.",
        "A good CUJ is anchored on business value, for example 'User initiates payment → Account validation → Payment processing → Confirmation delivered'. You have {cujs} CUJs defined.",
        "CUJs should drive your SLI/SLO strategy. Focus on segments where your application operates independently for the most actionable metrics. You have {cujs} CUJs defined.",
    ),
    (Topic.SLI, QuestionType.HOW, Specificity.BEGINNER): (
        """Here is how to create effective Service Level Indicators (SLIs).

**Step 1: Start with your CUJs**
SLIs should measure the health of your Critical User Journeys. You currently have {cujs} CUJs defined.

**Step 2: Ask what users would notice**
• Slow responses → measure latency
• Failed requests → measure error rate
• Service unavailable → measure availability

**Step 3: Measure what you control**
✅ "Payment processing success rate"
❌ "Third-party gateway availability"

**Step 4: Make them measurable**
• Percentages for success rates (99.5% success)
• Percentiles for latency (95th percentile < 200ms)
• Counts for throughput (1000 requests/minute)

Ready to define SLIs for a specific CUJ?""",
    ),
    (Topic.SLI, QuestionType.WHAT, None): (
        """Service Level Indicators (SLIs) are quantitative measures of how well your system performs from the user's perspective.

**Key characteristics:**
• **User-focused**: they measure what users experience
• **Measurable**: based on real data
• **Actionable**: when they degrade, you know what to fix
• **Tied to CUJs**: each SLI maps to a Critical User Journey

**Your current state:** {slis} SLIs defined. A good starting point is 3-5 key SLIs per major CUJ.

**Tooling:**
• Obstack stores and visualizes SLI metrics
• Observe holds detailed logs for SLI troubleshooting
• PagerDuty alerts when SLIs breach thresholds""",
    ),
    (Topic.SLI, None, None): (
        "Service Level Indicators (SLIs) are metrics that reflect the health of your Critical User Journeys. They should be measurable and tied directly to user experience. You have {slis} SLIs defined.",
        "Good SLIs focus on what users notice: availability, latency, error rate and throughput, such as 'payment success rate' or '95th percentile response time'. You have {slis} SLIs defined.",
        "When choosing SLIs, ask 'What would users notice if this went wrong?' so your metrics track real user impact. You have {slis} SLIs defined.",
        "Base SLIs on your internal deliverables, the things your application controls directly. You have {slis} SLIs defined.",
    ),
    (Topic.SLO, QuestionType.HOW, Specificity.BEGINNER): (
        """Let me help you set up Service Level Objectives (SLOs) that work.

**Step 1: Measure current performance**
• Review your existing SLIs (you have {slis} defined)
• Gather 2-4 weeks of baseline data

**Step 2: Set achievable targets**
If you are at 98.5% success today, start with a 99% SLO.

**Step 3: Align with business needs**
Not everything needs 99.99% uptime. Weigh business impact against engineering cost.

**Step 4: Define error budgets**
• 99.9% availability = about 43 minutes of downtime per month
• 99% availability = about 7.2 hours of downtime per month

**Step 5: Iterate**
Review SLOs monthly and tighten targets as reliability improves.""",
    ),
    (Topic.SLO, QuestionType.WHAT, None): (
        """Service Level Objectives (SLOs) are reliability targets: they define what "good enough" looks like for your service.

**SLO structure:**
• **SLI**: what you measure (request success rate)
• **Target**: the threshold (99.5%)
• **Time window**: the period (30 days)
• **Error budget**: how much failure is acceptable (0.5% over 30 days)

**Your current state:** {slos} SLOs defined. Aim for 1-2 SLOs per major SLI.

**Error budgets in practice:**
• Healthy budget → focus on features
• Burning budget → focus on reliability""",
    ),
    (Topic.SLO, None, None): (
        "Service Level Objectives (SLOs) are targets for your SLIs. They define what 'good enough' looks like and balance reliability with feature velocity. You have {slos} SLOs defined.",
        "Start with achievable SLO targets based on current performance, then iterate. A 99.9% availability SLO allows about 43 minutes of downtime per month. You have {slos} SLOs defined.",
        "SLOs should follow business requirements. Work with stakeholders to find the level of service actually needed. You have {slos} SLOs defined.",
        "Error budgets from SLOs tell you when to prioritize reliability over new features. You have {slos} SLOs defined.",
    ),
    (Topic.OBSERVABILITY, QuestionType.HOW, Specificity.BEGINNER): (
        """Here is how to start with observability.

**Maturity levels:**
{maturity_list}

**Where to start (Level 1):**
1. Set up basic logging to Observe
2. Create your first dashboard in Obstack
3. Configure basic alerts to PagerDuty
4. Define one CUJ to focus your efforts (you have {cujs} so far)

**Logs versus metrics:**
• Logs answer "What went wrong?"
• Metrics answer "Is everything OK?"

**Your first week:**
• Day 1-2: define your most critical user journey
• Day 3-4: identify 2-3 key metrics for it
• Day 5-7: build basic dashboards and alerts""",
    ),
    (Topic.OBSERVABILITY, QuestionType.WHAT, None): (
        """Observability is your ability to understand what happens inside your systems by examining their outputs.

**Signals:**
• **Metrics**: real-time quantitative data (Obstack)
• **Logs**: detailed diagnostics (Observe)
• **Traces**: request flow through systems
• **Business context**: how technical health affects users

**Maturity progression:**
{maturity_levels}

**The approach:** start with CUJs ({cujs} defined), define SLIs ({slis}), set SLOs ({slos}), then build dashboards and alerts.""",
    ),
    (Topic.OBSERVABILITY, None, None): (
        "Shift from logs to metrics for proactive monitoring. Logs are great for diagnosis, metrics give real-time insight into application health.",
        "Observability maturity progresses through four levels: {maturity_levels}.",
        "Focus on application-level observability, not only infrastructure. Ask 'Is my application doing what it's supposed to do?' rather than 'Are my servers running?'",
        "Good observability combines metrics (Obstack), logs (Observe) and alerts (PagerDuty) for a complete picture of system health and user experience.",
    ),
    (Topic.SECURITY, QuestionType.HOW, Specificity.BEGINNER): (
        """Let's get you started with DevSecOps.

**Foundation (week 1-2):**
1. **Security scanning in CI/CD**: SAST, dependency scanning, container image scanning
2. **Secure development**: security items in code review, secure coding guidelines, input validation standards

**Security SLIs to track:**
• Vulnerability remediation time
• Security scan coverage
• Failed authentication rate
• Security incident response time

**Quick wins this week:**
1. Add a dependency scanner to your build
2. Create a security checklist for code reviews
3. Alert on failed-authentication spikes

Security is everyone's responsibility, not just a toolset.""",
    ),
    (Topic.SECURITY, None, None): (
        "DevSecOps shifts security left: security practices are part of development from the start rather than an afterthought.",
        "Key practices: automated security scanning in CI/CD, threat modeling during design, secure coding and runtime protection.",
        "Security SLIs might include vulnerability remediation time, scan coverage, failed authentication rate or incident response time.",
        "Security is culture as much as tooling. Train developers, establish security champions and make security everyone's responsibility.",
    ),
    (Topic.IMPLEMENTATION, None, None): (
        """Here is a practical implementation approach.

**Strategy:**
1. **Start small**: pick one critical user journey
2. **Measure first**: establish baseline metrics before setting targets
3. **Iterate quickly**: implement, measure, adjust, repeat
4. **Build consensus**: agree as a team on what you measure and why

**Typical timeline:**
• Week 1: define the CUJ and key metrics
• Week 2: basic monitoring and dashboards
• Week 3: initial SLIs and SLOs
• Week 4: alerting and review processes

**Your knowledge base:** {cujs} CUJs, {slis} SLIs, {slos} SLOs.

Which part would you like to implement first?""",
    ),
    (Topic.COMPARISON, None, None): (
        """Happy to compare! Could you say more precisely what to compare? For example:
• SLIs vs SLOs
• Monitoring vs Observability
• Different observability tools
• Security approaches
• Implementation strategies""",
    ),
    (Topic.TROUBLESHOOTING, None, None): (
        """Let's troubleshoot systematically.

**Framework:**
1. **Define the problem**: what exactly is broken?
2. **Check your SLIs**: are key metrics showing issues? ({slis} SLIs defined)
3. **Review recent changes**: what changed?
4. **Follow the CUJ**: where in the user journey does it fail?

**Common issues:**
• **Noisy alerts**: review SLO thresholds and alert on user impact, not infrastructure
• **Unsure what to monitor**: start with your most critical user journey and 3-5 metrics
• **Overwhelming dashboards**: build role-based dashboards focused on trends
• **SLOs keep breaching**: check targets against real performance and error budget burn

What specific issue are you facing?""",
    ),
    (Topic.GENERAL, None, Specificity.BEGINNER): (
        """Welcome! I can help you get started with DevSecOps observability.

**Your current setup:**
• Knowledge base entries: {knowledge_total}
• Context files loaded: {context_files}

**Good starting points:**
1. "How do I start with observability?"
2. "What's a CUJ?"
3. "Help me define SLIs"
4. "How do I set SLOs?"

What would you like to explore first?""",
    ),
    (Topic.GENERAL, None, None): (
        """I'm your DevSecOps SME assistant, specialized in observability, CUJs, SLIs and SLOs.

**I can help with:**
• **Critical User Journeys**: define and refine user workflows
• **SLI/SLO strategy**: meaningful metrics and targets
• **Observability**: practical monitoring approaches
• **DevSecOps practices**: security integrated into development

**Your context:**
• {cujs} CUJs, {slis} SLIs, {slos} SLOs defined
• {context_files} context files loaded

What challenge can I help you solve today?""",
    ),
}

# Checked in order for comparison messages before the generic comparison reply.
COMPARISON_TEMPLATES: tuple[tuple[tuple[str, ...], str], ...] = (
    (
        ("sli", "slo"),
        """Here's the key difference between SLIs and SLOs:

**SLIs (Service Level Indicators)** are the measurements: "request success rate is currently 99.2%". They tell you what is happening now.

**SLOs (Service Level Objectives)** are the targets: "request success rate should be ≥99.5%". They define what good looks like.

**Analogy:** the SLI is your speedometer reading, the SLO is the speed limit.

**Your current state:**
• SLIs defined: {slis}
• SLOs defined: {slos}

Keep to 1-2 SLOs per key SLI to avoid alert fatigue.""",
    ),
    (
        ("observability", "monitoring"),
        """Here's how observability and monitoring differ:

**Monitoring** is reactive and infrastructure-focused: you watch for failures you already expect (CPU > 80%).

**Observability** is proactive and user-focused: you can explain failures you did not predict (checkout success rate < 99%).

**Evolution:**
{maturity_list}

Which approach does your current setup lean toward?""",
    ),
)

TOPIC_SEARCH_TERMS = {
    Topic.CUJ: "user journey",
    Topic.SLI: "indicator",
    Topic.SLO: "objective",
    Topic.OBSERVABILITY: "observability",
    Topic.SECURITY: "security",
    Topic.IMPLEMENTATION: "implement",
    Topic.TROUBLESHOOTING: "troubleshoot",
}
