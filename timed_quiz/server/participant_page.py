"""Single static page that lets a participant take a timed quiz in the browser."""

PARTICIPANT_PAGE_HTML = """<!doctype html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <title>Timed Quiz</title>
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <style>
      :root { font-family: 'Inter', system-ui, sans-serif; background: #0b1120; color: #f5f7ff; }
      body { margin: 0 auto; max-width: 48rem; padding: 1.5rem; display: flex; flex-direction: column; gap: 1rem; }
      .card { background: #111a30; border-radius: 0.75rem; padding: 1.5rem; box-shadow: 0 0.5rem 1.5rem rgba(0, 0, 0, 0.4); }
      .hidden { display: none; }
      button { border: none; border-radius: 0.75rem; padding: 0.75rem 1.25rem; font-size: 1rem; background: #1f9aa5; color: #fff; cursor: pointer; }
      button:disabled { opacity: 0.5; cursor: not-allowed; }
      input, select { font-size: 1rem; padding: 0.6rem; border-radius: 0.5rem; border: 1px solid #334155; background: #0f172a; color: #f5f7ff; }
      .option { display: block; padding: 0.75rem; margin: 0.5rem 0; border-radius: 0.5rem; background: #1e293b; cursor: pointer; }
      .option.selected { outline: 2px solid #1f9aa5; }
      #timer { font-size: 1.25rem; color: #facc15; }
      #status { min-height: 1.25rem; color: #94a3b8; }
      .nav { display: flex; gap: 0.5rem; justify-content: space-between; }
    </style>
    <script>
      window.MathJax = { tex: { inlineMath: [['$','$']], displayMath: [['$$','$$']] } };
    </script>
    <script defer src=\"https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js\"></script>
  </head>
  <body>
    <section id=\"join\" class=\"card\">
      <h1>Timed Quiz</h1>
      <p><select id=\"quiz-list\"></select></p>
      <p><input id=\"name\" placeholder=\"Your name\" /></p>
      <button id=\"start\">Start</button>
      <div id=\"status\"></div>
    </section>
    <section id=\"quiz\" class=\"card hidden\">
      <div id=\"quiz-title\"></div>
      <div id=\"timer\"></div>
      <div id=\"question\"></div>
      <div class=\"nav\">
        <button id=\"prev\">Previous</button>
        <button id=\"submit\">Submit</button>
        <button id=\"next\">Next</button>
      </div>
    </section>
    <section id=\"result\" class=\"card hidden\">
      <h2>Result</h2>
      <div id=\"summary\"></div>
      <button id=\"restart\">Take another quiz</button>
    </section>
    <script>
      const byId = (id) => document.getElementById(id);
      const session = { quiz: null, index: 0, attemptId: null, deadline: 0, timer: null, chosen: {}, submitted: false };

      async function api(path, options = {}) {
        const response = await fetch('/api' + path, {
          headers: { 'Content-Type': 'application/json' },
          ...options,
        });
        const body = await response.json();
        if (!response.ok) { throw new Error(body.detail || response.statusText); }
        return body;
      }

      function show(sectionId) {
        ['join', 'quiz', 'result'].forEach((id) => byId(id).classList.add('hidden'));
        byId(sectionId).classList.remove('hidden');
      }

      async function loadQuizzes() {
        const list = byId('quiz-list');
        list.innerHTML = '';
        try {
          const quizzes = await api('/quizzes');
          quizzes.forEach((quiz) => {
            const option = document.createElement('option');
            option.value = quiz.id;
            option.textContent = `${quiz.subject} - ${quiz.title} (${quiz.duration_minutes} min)`;
            list.appendChild(option);
          });
          byId('status').textContent = quizzes.length ? '' : 'No quizzes available yet.';
        } catch (error) {
          byId('status').textContent = 'Failed to load quizzes.';
        }
      }

      function renderTimer() {
        const left = Math.max(0, Math.round((session.deadline - Date.now()) / 1000));
        const minutes = String(Math.floor(left / 60)).padStart(2, '0');
        const seconds = String(left % 60).padStart(2, '0');
        byId('timer').textContent = `${minutes}:${seconds}`;
        return left;
      }

      function renderQuestion() {
        const question = session.quiz.questions[session.index];
        const container = byId('question');
        container.innerHTML = `<div>${question.statement_html}</div>`;
        question.options.forEach((option) => {
          const row = document.createElement('label');
          row.className = 'option' + (session.chosen[question.id] === option.id ? ' selected' : '');
          row.innerHTML = option.label_html;
          row.onclick = () => choose(question.id, option.id);
          container.appendChild(row);
        });
        byId('quiz-title').textContent = `${session.quiz.subject} - ${session.quiz.title} (${session.index + 1}/${session.quiz.questions.length})`;
        if (window.MathJax && MathJax.typesetPromise) { MathJax.typesetPromise([container]); }
      }

      async function choose(questionId, optionId) {
        session.chosen[questionId] = optionId;
        renderQuestion();
        try {
          await api(`/attempts/${session.attemptId}/answer`, {
            method: 'POST',
            body: JSON.stringify({ question_id: questionId, option_id: optionId }),
          });
        } catch (error) {
          byId('status').textContent = `Answer not saved: ${error.message}`;
        }
      }

      async function submitAttempt() {
        if (session.submitted) { return; }
        session.submitted = true;
        clearInterval(session.timer);
        try {
          const result = await api(`/attempts/${session.attemptId}/submit`, { method: 'POST' });
          byId('summary').innerHTML = `Total: ${result.total}<br/>Correct: ${result.correct}<br/>Wrong: ${result.wrong}<br/>Score: ${result.score}`;
          show('result');
        } catch (error) {
          session.submitted = false;
          byId('status').textContent = `Submit failed: ${error.message}`;
        }
      }

      byId('start').onclick = async () => {
        const name = byId('name').value.trim();
        const quizId = byId('quiz-list').value;
        if (!name) { byId('status').textContent = 'Enter your name'; return; }
        try {
          session.quiz = await api(`/quizzes/${quizId}`);
          const attempt = await api('/attempts', { method: 'POST', body: JSON.stringify({ quiz_id: quizId, name }) });
          Object.assign(session, { attemptId: attempt.attempt_id, index: 0, chosen: {}, submitted: false });
          session.deadline = Date.now() + session.quiz.duration_minutes * 60 * 1000;
          session.timer = setInterval(() => { if (renderTimer() <= 0) { submitAttempt(); } }, 1000);
          renderTimer();
          show('quiz');
          renderQuestion();
        } catch (error) {
          byId('status').textContent = `Could not start quiz: ${error.message}`;
        }
      };
      byId('prev').onclick = () => { if (session.index > 0) { session.index -= 1; renderQuestion(); } };
      byId('next').onclick = () => { if (session.index < session.quiz.questions.length - 1) { session.index += 1; renderQuestion(); } };
      byId('submit').onclick = submitAttempt;
      byId('restart').onclick = () => { show('join'); loadQuizzes(); };

      loadQuizzes();
    </script>
  </body>
</html>
"""
