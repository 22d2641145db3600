"""
Prompt templates for each role.

Templates use ``str.format`` placeholders. Each template names the tagged
fields the role's parser expects in the response.
"""

# Planner

TASK_PLAN_PROMPT = """Split the overall task into subtasks that the available agents can execute.

<overall_task>
{overall_task}
</overall_task>

<available_agents>
{executor_agents_info}
</available_agents>

Rules:
- Each subtask must be concrete, action-oriented and executable by one agent without further decomposition.
- Use 2-3 subtasks for simple tasks and 4-6 for complex multi-step tasks.
- Include explicit search steps when current or external knowledge is needed.
- Delegate self-contained reasoning or code generation as a single subtask.
- The final subtask must turn the results into the exact format the overall task asks for.

Return the subtasks in order, in this exact format:
<tasks>
<task>Brief, specific subtask 1</task>
<task>Brief, specific subtask 2</task>
</tasks>"""

TASK_CHECK_PROMPT = """Evaluate whether a finished subtask achieved its goal within the overall mission.

<overall_task>
{overall_task}
</overall_task>

<task_plan>
{task_plan}
</task_plan>

<current_task id="{last_completed_task_id}">
{last_completed_task}
</current_task>

<current_task_description>
{last_completed_task_description}
</current_task_description>

<current_task_result>
{last_completed_task_result}
</current_task_result>

Choose one verdict:
- success: every objective of the subtask was met and the output is usable by later subtasks.
- partial success: useful output with gaps that may need more work.
- failed: the output is unusable or does not advance the mission.

First analyse the result inside <analysis></analysis>, then answer with exactly one of:
<task_status>success</task_status>
<task_status>partial success</task_status>
<task_status>failed</task_status>"""

TASK_UPDATE_PLAN_PROMPT = """Decide whether the remaining plan should change given the progress so far.

<overall_task>
{overall_task}
</overall_task>

<previous_task_plan>
{previous_task_plan}
</previous_task_plan>

<unfinished_task_plan>
{unfinished_task_plan}
</unfinished_task_plan>

Choose:
- stop: the completed tasks already answer the overall task.
- update: completed work revealed that the remaining tasks are wrong, redundant or badly ordered.
- continue: the remaining tasks are still appropriate.

Analyse inside <analysis></analysis>, then give your decision as <choice>continue</choice>, <choice>update</choice> or <choice>stop</choice>.
When you choose update, list the replacement for all remaining tasks:
<updated_unfinished_task_plan>
<task>Revised remaining task 1</task>
<task>Revised remaining task 2</task>
</updated_unfinished_task_plan>"""

# Assigner

TASK_ASSIGN_PROMPT = """Select the agent that should execute the next subtask of a multi-step plan.

<overall_task>
{overall_task}
</overall_task>

<task_plan_with_status>
{task_plan}
</task_plan_with_status>

<available_agents>
{executor_agents_info}
</available_agents>

<next_task>
{next_task}
</next_task>

<available_agents_names>
You can only choose one of: {executor_agents_names}
</available_agents_names>

The selected agent will NOT see the overall task, the plan or other agents' results. The detailed task
description must therefore be fully self-contained: include all context, inputs from earlier results,
requirements and the expected output.

Answer in this format:
<assignment>
<reasoning>Which skills the task needs and why the agent fits</reasoning>
<selected_agent>agent_name</selected_agent>
<detailed_task_description>Complete, self-contained instruction</detailed_task_description>
</assignment>"""

# Executor

TASK_EXECUTE_PROMPT = """Complete the current subtask. You cannot ask for confirmation or help.

<overall_task>
{overall_task}
</overall_task>

<overall_plan_to_solve_the_task>
{overall_plan}
</overall_plan_to_solve_the_task>

<current_subtask>
<task_name>
{task_name}
</task_name>
<task_description>
{task_description}
</task_description>
</current_subtask>

Focus on this subtask and report its concrete result."""

TASK_EXECUTE_WITH_REFLECTION_PROMPT = """A previous attempt at this subtask did not succeed. Retry it using the reflection below.
You cannot ask for confirmation or help.

<overall_task>
{overall_task}
</overall_task>

<overall_plan_to_solve_the_task>
{overall_plan}
</overall_plan_to_solve_the_task>

<current_subtask>
<task_name>
{task_name}
</task_name>
<task_description>
{task_description}
</task_description>
</current_subtask>

<previous_attempts_and_reflections>
{previous_attempts}
</previous_attempts_and_reflections>

Avoid the mistakes described above and report the concrete result."""

TASK_SELF_CHECK_PROMPT = """Judge whether the following subtask has been completely finished.

<task_name>
{task_name}
</task_name>

<task_description>
{task_description}
</task_description>

<task_result>
{task_result}
</task_result>

A subtask is complete only when every requirement is met and nothing remains to be done.
Explain briefly, then answer <task_check>yes</task_check> or <task_check>no</task_check>."""

TASK_REFLECTION_PROMPT = """The following subtask attempt was not successful.

<task_name>
{task_name}
</task_name>

<task_description>
{task_description}
</task_description>

<task_result>
{task_result}
</task_result>

Write a short reflection for the next attempt:
- why the attempt failed and what was tried
- what partially worked and should be kept
- what to do differently next time"""

TASK_SUMMARY_PROMPT = """Summarize the outcome of this subtask without markdown formatting.

<task_name>
{task_name}
</task_name>

<task_description>
{task_description}
</task_description>

<task_result>
{task_result}
</task_result>

Include the answer or solution, key outputs, files created or modified (if any) and the important steps taken."""

# Answerer

FINAL_ANSWER_PROMPT = """Extract the final answer to a question from the results of its subtasks.

<question>
{question}
</question>

<task_execution_results>
{task_results}
</task_execution_results>

Do not solve the question again; derive the answer from the results above.
Requirements:
- A number is written with digits only, without thousands separators or units unless asked.
- A string uses as few words as possible, without articles or abbreviations.
- A list is comma separated, applying the rules above to each element.
- If the question's assumptions conflict with the facts, follow the question.

Answer in this format:
<analysis>How the results lead to the answer</analysis>
<answer>The final answer</answer>"""

ANSWER_CHECK_PROMPT = """Decide whether two answers to the same question are semantically equivalent.

Question: {question}

Model Answer: {model_answer}
Ground Truth Answer: {ground_truth}

Formatting, unit or wording differences are acceptable; different factual content is not. Be strict.

Answer in this format:
<analysis>Comparison of the two answers</analysis>
<equivalent>yes</equivalent> or <equivalent>no</equivalent>"""


def format_prompt(template: str, **values: object) -> str:
	"""Fill a template; ``None`` values render as empty strings."""
	return template.format(**{key: "" if value is None else value for key, value in values.items()})
