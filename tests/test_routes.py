"""Tests for route handlers and blueprints."""

import pytest

from postdesk import create_app
from postdesk.extensions import db
from postdesk.models import Post


class TestCoreRoutes:
    """Test cases for health and index routes."""

    def test_health(self, client):
        response = client.get('/health')
        assert response.status_code == 200
        assert response.json['status'] == 'ok'
        assert 'message' in response.json
        assert response.json['db'] == 'connected'

    def test_api_index(self, client):
        response = client.get('/api')
        assert response.status_code == 200
        assert response.json == {'message': 'API is working'}

    def test_unknown_route(self, client):
        response = client.get('/nonexistent')
        assert response.status_code == 404
        assert response.json['success'] is False

    def test_unknown_api_route(self, client):
        assert client.get('/api/nonexistent').status_code == 404

    def test_response_headers(self, client):
        response = client.get('/health', headers={'X-Request-ID': 'abc123'})
        assert response.headers['X-Request-ID'] == 'abc123'
        assert response.headers['X-Response-Time'].endswith('ms')
        assert response.headers['X-Content-Type-Options'] == 'nosniff'
        assert response.headers['Access-Control-Allow-Origin'] == '*'


class TestCreatePost:
    """POST /api/posts"""

    def test_create_post(self, client, auth_headers, test_user):
        new_post = {
            'title': 'New Test Post',
            'content': 'This is a new test post content',
            'category': 'fedcba9876543210fedcba9876543210',
        }
        response = client.post('/api/posts', json=new_post, headers=auth_headers)

        assert response.status_code == 201
        data = response.json
        assert len(data['id']) == 32
        assert data['title'] == new_post['title']
        assert data['content'] == new_post['content']
        assert data['category'] == new_post['category']
        assert data['author'] == test_user.hex_id
        assert data['status'] == 'draft'
        assert data['views'] == 0
        assert data['createdAt'] and data['updatedAt']

    def test_requires_authentication(self, client):
        response = client.post('/api/posts', json={'title': 'Unauthorized Post', 'content': 'Nope'})
        assert response.status_code == 401
        assert response.json == {'success': False, 'error': 'No token provided'}
        assert db.session.execute(db.select(Post)).first() is None

    def test_missing_title(self, client, auth_headers):
        response = client.post('/api/posts', json={'content': 'No title'}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json['error'] == 'Title is required'

    def test_missing_content(self, client, auth_headers):
        response = client.post('/api/posts', json={'title': 'No content'}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json['error'] == 'Content is required'

    def test_blank_title_after_sanitizing(self, client, auth_headers):
        response = client.post('/api/posts', json={'title': '<b></b>', 'content': 'x'}, headers=auth_headers)
        assert response.status_code == 400
        assert 'required' in response.json['error']

    def test_title_too_long(self, client, auth_headers):
        response = client.post('/api/posts', json={'title': 'a' * 201, 'content': 'x'}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json['error'] == 'Validation failed: Title cannot exceed 200 characters'

    def test_invalid_status(self, client, auth_headers):
        response = client.post(
            '/api/posts', json={'title': 'T', 'content': 'x', 'status': 'archived'}, headers=auth_headers
        )
        assert response.status_code == 400
        assert response.json['error'].startswith('Validation failed: status')

    def test_auto_slug(self, client, auth_headers):
        response = client.post(
            '/api/posts', json={'title': 'My Awesome Blog Post', 'content': 'Content here'}, headers=auth_headers
        )
        assert response.status_code == 201
        assert response.json['slug'] == 'my-awesome-blog-post'

    def test_explicit_slug_lowercased(self, client, auth_headers):
        response = client.post(
            '/api/posts', json={'title': 'Any', 'content': 'x', 'slug': 'Custom-Slug'}, headers=auth_headers
        )
        assert response.json['slug'] == 'custom-slug'

    def test_author_in_payload_ignored(self, client, auth_headers, test_user, other_user):
        response = client.post(
            '/api/posts',
            json={'title': 'Mine', 'content': 'x', 'author': other_user.hex_id, 'views': 99},
            headers=auth_headers,
        )
        assert response.status_code == 201
        assert response.json['author'] == test_user.hex_id
        assert response.json['views'] == 0

    def test_duplicate_slug(self, client, auth_headers, test_post):
        response = client.post('/api/posts', json={'title': 'Test Post', 'content': 'again'}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json == {'success': False, 'error': 'slug already exists'}

    def test_title_markup_stripped(self, client, auth_headers):
        response = client.post(
            '/api/posts',
            json={'title': '<script>alert(1)</script><em>Clean</em> title', 'content': 'x'},
            headers=auth_headers,
        )
        assert response.status_code == 201
        assert response.json['title'] == 'Clean title'
        assert response.json['slug'] == 'clean-title'

    def test_non_object_body(self, client, auth_headers):
        response = client.post('/api/posts', json=['title', 'content'], headers=auth_headers)
        assert response.status_code == 400
        assert response.json['error'] == 'Request body must be a JSON object'

    def test_token_for_deleted_user(self, client, auth_headers, test_user):
        db.session.delete(test_user)
        db.session.commit()
        response = client.post('/api/posts', json={'title': 'Ghost', 'content': 'x'}, headers=auth_headers)
        assert response.status_code == 401


@pytest.fixture
def limited_client(app_config):
    app = create_app({**app_config, 'RATELIMIT_ENABLED': True, 'RATELIMIT_STORAGE_URI': 'memory://'})
    with app.app_context():
        db.create_all()
        yield app.test_client()
        db.session.remove()
        db.drop_all()


class TestWriteRateLimit:
    """Write routes are throttled before the token is checked."""

    def test_unauthenticated_writes_throttled(self, limited_client):
        for _ in range(30):
            response = limited_client.post('/api/posts', json={'title': 'Spam', 'content': 'x'})
            assert response.status_code == 401

        response = limited_client.post('/api/posts', json={'title': 'Spam', 'content': 'x'})
        assert response.status_code == 429
        assert response.json['success'] is False

    def test_bad_tokens_throttled(self, limited_client):
        headers = {'Authorization': 'Bearer invalid-token'}
        url = '/api/posts/' + 'ab' * 16
        statuses = [limited_client.delete(url, headers=headers).status_code for _ in range(31)]
        assert statuses[:30] == [401] * 30
        assert statuses[30] == 429


class TestListPosts:
    """GET /api/posts"""

    def test_list_posts(self, client, test_post):
        response = client.get('/api/posts')
        assert response.status_code == 200
        assert isinstance(response.json, list)
        assert len(response.json) == 1
        assert response.json[0]['author']['username'] == 'testuser'
        assert response.headers['X-Total-Count'] == '1'

    def test_filter_by_category(self, client, test_user, post_factory):
        category = 'aaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa'
        post_factory(test_user, 'Filtered Post', category=category)
        post_factory(test_user, 'Another Post', category='bbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbb')

        response = client.get(f'/api/posts?category={category}')
        assert response.status_code == 200
        assert len(response.json) == 1
        assert response.json[0]['category'] == category

    def test_paginate(self, client, many_posts):
        page1 = client.get('/api/posts?page=1&limit=10')
        page2 = client.get('/api/posts?page=2&limit=10')

        assert page1.status_code == 200
        assert page2.status_code == 200
        assert len(page1.json) == 10
        assert len(page2.json) == 5
        assert page1.json[0]['id'] != page2.json[0]['id']
        assert page2.json[0]['title'] == 'Pagination Post 4'

    def test_sort_newest_first(self, client, many_posts):
        response = client.get('/api/posts?sort=-createdAt')
        assert response.json[0]['title'] == 'Pagination Post 14'

    def test_sort_oldest_first(self, client, many_posts):
        response = client.get('/api/posts?sort=createdAt&limit=1')
        assert [p['title'] for p in response.json] == ['Pagination Post 0']

    def test_invalid_sort(self, client):
        response = client.get('/api/posts?sort=-password_hash')
        assert response.status_code == 400
        assert response.json['error'] == 'Invalid sort field: password_hash'

    def test_non_numeric_paging_uses_defaults(self, client, many_posts):
        response = client.get('/api/posts?page=abc&limit=xyz')
        assert response.status_code == 200
        assert len(response.json) == 10

    def test_limit_capped(self, app, client, many_posts):
        app.config['POSTS_MAX_PAGE_LIMIT'] = 4
        response = client.get('/api/posts?limit=1000')
        assert len(response.json) == 4

    def test_limit_below_one(self, client, many_posts):
        response = client.get('/api/posts?limit=0')
        assert len(response.json) == 1

    def test_negative_page(self, client, many_posts):
        response = client.get('/api/posts?page=-3')
        assert response.status_code == 200
        assert response.json[0]['title'] == 'Pagination Post 14'

    def test_page_past_end(self, client, many_posts):
        response = client.get('/api/posts?page=3&limit=10')
        assert response.status_code == 200
        assert response.json == []
        assert response.headers['X-Total-Count'] == '15'

    @pytest.mark.parametrize('page', ['99999999999999999999', str(2**63), str(2**62)])
    def test_huge_page(self, client, many_posts, page):
        response = client.get(f'/api/posts?page={page}')
        assert response.status_code == 200
        assert response.json == []
        assert response.headers['X-Total-Count'] == '15'

    def test_huge_limit_without_cap(self, app, client, many_posts):
        app.config['POSTS_MAX_PAGE_LIMIT'] = 0
        response = client.get('/api/posts?limit=99999999999999999999&page=2')
        assert response.status_code == 200
        assert response.json == []

        response = client.get('/api/posts?limit=99999999999999999999')
        assert len(response.json) == 15


class TestGetPost:
    """GET /api/posts/<id> and /api/posts/slug/<slug>"""

    def test_get_by_id(self, client, test_post):
        response = client.get(f'/api/posts/{test_post.hex_id}')
        assert response.status_code == 200
        assert response.json['id'] == test_post.hex_id
        assert response.json['title'] == 'Test Post'

    def test_populates_author(self, client, test_post):
        response = client.get(f'/api/posts/{test_post.hex_id}')
        assert response.json['author']['username'] == 'testuser'
        assert response.json['author']['email'] == 'test@example.com'
        assert 'password_hash' not in response.json['author']

    def test_not_found(self, client):
        response = client.get('/api/posts/' + 'ab' * 16)
        assert response.status_code == 404
        assert response.json == {'success': False, 'error': 'Post not found'}

    def test_invalid_id_format(self, client):
        response = client.get('/api/posts/invalid-id-format')
        assert response.status_code == 400
        assert response.json['error'] == 'Invalid post ID format'

    def test_get_by_slug(self, client, test_post):
        response = client.get('/api/posts/slug/test-post')
        assert response.status_code == 200
        assert response.json['slug'] == 'test-post'
        assert response.json['title'] == 'Test Post'

    def test_get_by_slug_not_found(self, client):
        response = client.get('/api/posts/slug/non-existent-slug')
        assert response.status_code == 404


class TestUpdatePost:
    """PUT /api/posts/<id>"""

    def test_update_as_author(self, client, auth_headers, test_post):
        updates = {'title': 'Updated Test Post', 'content': 'This content has been updated'}
        response = client.put(f'/api/posts/{test_post.hex_id}', json=updates, headers=auth_headers)

        assert response.status_code == 200
        assert response.json['title'] == updates['title']
        assert response.json['content'] == updates['content']
        # slug is not re-derived on update
        assert response.json['slug'] == 'test-post'

        db.session.expire_all()
        assert db.session.get(Post, test_post.id).title == updates['title']

    def test_requires_authentication(self, client, test_post):
        response = client.put(f'/api/posts/{test_post.hex_id}', json={'title': 'Unauthorized Update'})
        assert response.status_code == 401
        assert 'error' in response.json

    def test_not_author(self, client, other_auth_headers, test_post):
        response = client.put(
            f'/api/posts/{test_post.hex_id}', json={'title': 'Forbidden Update'}, headers=other_auth_headers
        )
        assert response.status_code == 403
        assert response.json['error'] == 'Not authorized to update this post'

        db.session.expire_all()
        assert db.session.get(Post, test_post.id).title == 'Test Post'

    def test_not_found(self, client, auth_headers):
        response = client.put('/api/posts/' + 'cd' * 16, json={'title': 'Nope'}, headers=auth_headers)
        assert response.status_code == 404

    def test_invalid_id(self, client, auth_headers):
        response = client.put('/api/posts/not-an-id', json={'title': 'Nope'}, headers=auth_headers)
        assert response.status_code == 400

    def test_author_field_ignored(self, client, auth_headers, test_post, test_user, other_user):
        response = client.put(
            f'/api/posts/{test_post.hex_id}',
            json={'title': 'Valid Update', 'author': other_user.hex_id, 'author_id': other_user.id},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json['author'] == test_user.hex_id

        db.session.expire_all()
        assert db.session.get(Post, test_post.id).author_id == test_user.id

    def test_validation_errors_joined(self, client, auth_headers, test_post):
        response = client.put(
            f'/api/posts/{test_post.hex_id}', json={'title': '', 'content': '  '}, headers=auth_headers
        )
        assert response.status_code == 400
        assert response.json['error'] == 'Validation failed: Title is required, Content is required'

    def test_partial_update(self, client, auth_headers, test_post):
        response = client.put(
            f'/api/posts/{test_post.hex_id}', json={'status': 'published'}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json['status'] == 'published'
        assert response.json['title'] == 'Test Post'

    def test_clear_category(self, client, auth_headers, test_post):
        response = client.put(f'/api/posts/{test_post.hex_id}', json={'category': None}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json['category'] is None

    def test_slug_conflict(self, client, auth_headers, test_post, test_user, post_factory):
        other = post_factory(test_user, 'Second Post', slug='second-post')
        response = client.put(f'/api/posts/{other.hex_id}', json={'slug': 'test-post'}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json['error'] == 'slug already exists'


class TestDeletePost:
    """DELETE /api/posts/<id>"""

    def test_delete_as_author(self, client, auth_headers, test_post):
        hex_id = test_post.hex_id
        response = client.delete(f'/api/posts/{hex_id}', headers=auth_headers)
        assert response.status_code == 200
        assert response.json == {'message': 'Post deleted successfully'}

        assert client.get(f'/api/posts/{hex_id}').status_code == 404

    def test_requires_authentication(self, client, test_post):
        assert client.delete(f'/api/posts/{test_post.hex_id}').status_code == 401

    def test_not_author(self, client, other_auth_headers, test_post):
        response = client.delete(f'/api/posts/{test_post.hex_id}', headers=other_auth_headers)
        assert response.status_code == 403
        assert response.json['error'] == 'Not authorized to delete this post'
        assert client.get(f'/api/posts/{test_post.hex_id}').status_code == 200

    def test_not_found(self, client, auth_headers):
        assert client.delete('/api/posts/' + 'ef' * 16, headers=auth_headers).status_code == 404

    def test_invalid_id(self, client, auth_headers):
        assert client.delete('/api/posts/invalid-id', headers=auth_headers).status_code == 400


class TestUserRoutes:
    """Tests for /api/users"""

    def test_register(self, client):
        response = client.post('/api/users/register', json={
            'username': 'newuser',
            'email': 'new@example.com',
            'password': 'password123',
        })
        assert response.status_code == 201
        assert response.json['success'] is True
        assert response.json['user']['username'] == 'newuser'
        assert response.json['token']

    def test_register_duplicate_username(self, client, test_user):
        response = client.post('/api/users/register', json={
            'username': 'testuser',
            'email': 'unique@example.com',
            'password': 'password123',
        })
        assert response.status_code == 400
        assert response.json['error'] == 'username already exists'

    def test_register_invalid_email(self, client):
        response = client.post('/api/users/register', json={
            'username': 'someone',
            'email': 'not-an-email',
            'password': 'password123',
        })
        assert response.status_code == 400
        assert 'Please provide a valid email' in response.json['error']

    def test_register_short_password(self, client):
        response = client.post('/api/users/register', json={
            'username': 'someone',
            'email': 'someone@example.com',
            'password': 'short',
        })
        assert response.status_code == 400
        assert response.json['error'].startswith('Validation failed: password')

    def test_login(self, client, test_user):
        response = client.post('/api/users/login', json={'email': 'test@example.com', 'password': 'password123'})
        assert response.status_code == 200
        assert response.json['user']['id'] == test_user.hex_id

        me = client.get('/api/users/me', headers={'Authorization': f"Bearer {response.json['token']}"})
        assert me.status_code == 200
        assert me.json['user']['username'] == 'testuser'

    def test_login_wrong_password(self, client, test_user):
        response = client.post('/api/users/login', json={'email': 'test@example.com', 'password': 'wrong'})
        assert response.status_code == 401
        assert response.json == {'success': False, 'error': 'Invalid email or password'}

    def test_me_requires_token(self, client):
        assert client.get('/api/users/me').status_code == 401
